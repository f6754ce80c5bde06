"""
BalanceService - group and user balance reporting.

Composes the balance calculator and the settlement optimizer over snapshots
read from the ledger repository. Every call names the group or user it
reports on; there is no implicit current user.
"""

import logging
from typing import Dict, List

from decimal import Decimal

from settleup.core.exceptions import NotFoundError
from settleup.models.balance import NetBalance, Settlement
from settleup.models.ledger import Group
from settleup.repositories.ledger_repo import LedgerRepository
from settleup.schemas.balance import BalanceReport, SettlementView, UserBalance
from settleup.services.balance_calculator import compute_group_balances, total_group_expenses
from settleup.services.settlement_optimizer import calculate_settlements
from settleup.utils.money import money_sum

logger = logging.getLogger(__name__)


class BalanceService:
    def __init__(self, ledger_repo: LedgerRepository):
        self.ledger_repo = ledger_repo

    async def _require_group(self, group_id: str) -> Group:
        group = await self.ledger_repo.get_group(group_id)
        if group is None:
            raise NotFoundError("Group", group_id)
        return group

    async def _require_user(self, user_id: str) -> None:
        if await self.ledger_repo.get_account(user_id) is None:
            raise NotFoundError("User", user_id)

    async def _net_balances(self, group: Group) -> Dict[str, NetBalance]:
        expenses, splits = await self.ledger_repo.get_group_ledger(group.id)
        return compute_group_balances(group.id, group.member_ids, expenses, splits)

    async def _settlements(self, group: Group) -> List[Settlement]:
        balances = await self._net_balances(group)
        return calculate_settlements(group.member_ids, balances)

    async def group_balances(self, group_id: str) -> BalanceReport:
        """
        Balances for every member plus suggested settlements.

        Raises NotFoundError if the group does not exist.
        """
        group = await self._require_group(group_id)

        if not group.member_ids:
            return BalanceReport(group_id=group.id, group_name=group.name)

        expenses, splits = await self.ledger_repo.get_group_ledger(group.id)
        balances = compute_group_balances(group.id, group.member_ids, expenses, splits)
        settlements = calculate_settlements(group.member_ids, balances)

        accounts = await self.ledger_repo.get_accounts(list(group.member_ids))
        names = {account.id: account.name for account in accounts}

        user_balances = [
            UserBalance(
                user_id=account_id,
                user_name=names.get(account_id, ""),
                total_paid=balance.total_paid,
                total_owed=balance.total_owed,
                net_balance=balance.net
            )
            for account_id, balance in balances.items()
        ]
        settlement_views = [
            SettlementView(
                from_user_id=s.from_account_id,
                from_user_name=names.get(s.from_account_id, ""),
                to_user_id=s.to_account_id,
                to_user_name=names.get(s.to_account_id, ""),
                amount=s.amount
            )
            for s in settlements
        ]

        logger.debug(
            "Computed balances for group %s: %d members, %d settlements",
            group.id, len(user_balances), len(settlement_views)
        )

        return BalanceReport(
            group_id=group.id,
            group_name=group.name,
            user_balances=user_balances,
            settlements=settlement_views,
            total_group_expenses=total_group_expenses(group.id, expenses)
        )

    async def user_group_totals(self, group_id: str, user_id: str) -> NetBalance:
        """Paid/owed/net figures for one member of one group."""
        group = await self._require_group(group_id)
        await self._require_user(user_id)
        if not group.has_member(user_id):
            raise NotFoundError("Group member", user_id)
        balances = await self._net_balances(group)
        return balances[user_id]

    async def user_balance_summary(self, user_id: str) -> Dict[str, Decimal]:
        """Map of group id -> the user's net balance in that group."""
        await self._require_user(user_id)

        summary: Dict[str, Decimal] = {}
        for group in await self.ledger_repo.get_groups_for_user(user_id):
            balances = await self._net_balances(group)
            balance = balances.get(user_id)
            if balance is not None:
                summary[group.id] = balance.net
        return summary

    async def total_owed_by_user(self, user_id: str) -> Decimal:
        """
        Sum of the user's unsettled splits across every group.

        Group membership is not checked; splits left behind in groups the user
        has left still count.
        """
        await self._require_user(user_id)
        splits = await self.ledger_repo.get_unsettled_splits_for_user(user_id)
        return money_sum(s.amount for s in splits)

    async def is_group_fully_settled(self, group_id: str) -> bool:
        """
        True when the group needs no transfers.

        This is about net balances cancelling out, not about every split being
        flagged settled.
        """
        group = await self._require_group(group_id)
        if not group.member_ids:
            return True
        return not await self._settlements(group)
