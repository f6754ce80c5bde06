"""
Balance calculator - reduces one group's ledger to a net balance per member.

Core algorithm:
1. Keep only the group's expenses and the splits belonging to them
2. Check every expense's splits add up to its amount
3. total_paid  = sum of expense amounts the member paid (settlement state ignored)
4. total_owed  = sum of the member's unsettled split amounts
5. net         = total_paid - total_owed

Settling a split lowers the debtor's total_owed only. The payer's total_paid
is left as recorded, so a settled split moves the debtor's net up without
moving the payer's net down.
"""

from typing import Dict, Iterable, List, Sequence

from decimal import Decimal

from settleup.models.balance import NetBalance
from settleup.models.ledger import Expense, Split
from settleup.utils.ledger_validation import validate_expense_splits
from settleup.utils.money import ZERO, money_sum


def compute_group_balances(
    group_id: str,
    members: Sequence[str],
    expenses: Iterable[Expense],
    splits: Iterable[Split],
) -> Dict[str, NetBalance]:
    """
    Compute a NetBalance for every member of the group.

    Members with no activity get a zero entry. The mapping preserves member
    order. An empty member list returns an empty mapping.

    Raises InvariantViolationError if an expense's splits are unbalanced.
    """
    if not members:
        return {}

    group_expenses: List[Expense] = [e for e in expenses if e.group_id == group_id]
    expense_ids = {e.id for e in group_expenses}
    group_splits: List[Split] = [s for s in splits if s.expense_id in expense_ids]

    validate_expense_splits(group_expenses, group_splits)

    paid: Dict[str, Decimal] = {}
    for expense in group_expenses:
        paid[expense.payer_id] = paid.get(expense.payer_id, ZERO) + expense.amount

    owed: Dict[str, Decimal] = {}
    for split in group_splits:
        if split.settled:
            continue
        owed[split.debtor_id] = owed.get(split.debtor_id, ZERO) + split.amount

    balances: Dict[str, NetBalance] = {}
    for account_id in members:
        balances[account_id] = NetBalance(
            account_id=account_id,
            total_paid=paid.get(account_id, ZERO),
            total_owed=owed.get(account_id, ZERO),
        )
    return balances


def total_group_expenses(group_id: str, expenses: Iterable[Expense]) -> Decimal:
    """Sum of every expense amount recorded in the group."""
    return money_sum(e.amount for e in expenses if e.group_id == group_id)
