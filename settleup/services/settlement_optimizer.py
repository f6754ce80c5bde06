"""
Settlement optimizer - turns net balances into a list of transfers.

Greedy largest-to-largest matching. Every step retires at least one creditor
or debtor, so it emits at most #creditors + #debtors - 1 transfers (one per
debtor when there is a single creditor, and vice versa). It is deterministic
but not a minimum-transaction solution; finding the true minimum is a much
harder combinatorial problem and would change the output.
"""

from typing import List, Mapping, Sequence

from decimal import Decimal

from settleup.models.balance import NetBalance, Settlement
from settleup.utils.money import round_half_up

# Transfers of this amount or less are not emitted
DUST_THRESHOLD = Decimal("0.01")


class _Position:
    __slots__ = ("account_id", "amount")

    def __init__(self, account_id: str, amount: Decimal):
        self.account_id = account_id
        self.amount = amount


def calculate_settlements(
    members: Sequence[str],
    net_balances: Mapping[str, NetBalance],
) -> List[Settlement]:
    """
    Match debtors to creditors, largest remaining amounts first.

    Ties keep member order (stable sort). Output order is the order in which
    pairs are matched.
    """
    creditors: List[_Position] = []
    debtors: List[_Position] = []

    for account_id in members:
        balance = net_balances.get(account_id)
        if balance is None:
            continue
        net = balance.net
        if net > 0:
            creditors.append(_Position(account_id, net))
        elif net < 0:
            debtors.append(_Position(account_id, -net))  # Store positive debt amount

    creditors.sort(key=lambda p: p.amount, reverse=True)
    debtors.sort(key=lambda p: p.amount, reverse=True)

    settlements: List[Settlement] = []
    creditor_idx = 0
    debtor_idx = 0

    while creditor_idx < len(creditors) and debtor_idx < len(debtors):
        creditor = creditors[creditor_idx]
        debtor = debtors[debtor_idx]

        amount = min(creditor.amount, debtor.amount)

        if amount > DUST_THRESHOLD:
            settlements.append(Settlement(
                from_account_id=debtor.account_id,
                to_account_id=creditor.account_id,
                amount=round_half_up(amount),
            ))

        creditor.amount -= amount
        debtor.amount -= amount

        if creditor.amount == 0:
            creditor_idx += 1
        if debtor.amount == 0:
            debtor_idx += 1

    return settlements
