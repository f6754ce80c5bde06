from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from settleup.api.deps import get_ledger_repo
from settleup.main import app
from settleup.models.ledger import Account, Expense, Group, Split


class FakeLedgerRepository:
    """In-memory stand-in for LedgerRepository with the same async interface."""

    def __init__(self):
        self.accounts: Dict[str, Account] = {}
        self.groups: Dict[str, Group] = {}
        self.expenses: List[Expense] = []
        self.splits: Dict[str, Split] = {}
        self.status_updates: List[Split] = []

    # setup helpers

    def add_account(self, account_id: str, name: str) -> Account:
        account = Account(id=account_id, name=name)
        self.accounts[account_id] = account
        return account

    def add_group(self, group_id: str, name: str, member_ids) -> Group:
        group = Group(id=group_id, name=name, member_ids=tuple(member_ids))
        self.groups[group_id] = group
        return group

    def add_expense(self, expense_id: str, group_id: str, payer_id: str, amount: str,
                    shares: Dict[str, str], settled: Tuple[str, ...] = ()) -> Expense:
        """shares maps debtor id -> amount; debtors listed in settled start settled."""
        expense = Expense(id=expense_id, group_id=group_id, payer_id=payer_id, amount=Decimal(amount))
        self.expenses.append(expense)
        for debtor_id, share in shares.items():
            split_id = f"{expense_id}-{debtor_id}"
            split = Split(id=split_id, expense_id=expense_id, debtor_id=debtor_id, amount=Decimal(share))
            if debtor_id in settled:
                split = split.mark_settled(datetime(2024, 1, 1, tzinfo=timezone.utc))
            self.splits[split_id] = split
        return expense

    # repository interface

    async def get_account(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)

    async def get_accounts(self, account_ids: List[str]) -> List[Account]:
        return [self.accounts[a] for a in account_ids if a in self.accounts]

    async def get_group(self, group_id: str) -> Optional[Group]:
        return self.groups.get(group_id)

    async def get_groups_for_user(self, user_id: str) -> List[Group]:
        return [g for g in self.groups.values() if g.has_member(user_id)]

    async def get_group_ledger(self, group_id: str):
        expenses = [e for e in self.expenses if e.group_id == group_id]
        ids = {e.id for e in expenses}
        return expenses, [s for s in self.splits.values() if s.expense_id in ids]

    async def get_unsettled_splits_for_user(self, user_id: str, group_id: Optional[str] = None):
        expense_groups = {e.id: e.group_id for e in self.expenses}
        return [
            s for s in self.splits.values()
            if s.debtor_id == user_id and not s.settled
            and (group_id is None or expense_groups.get(s.expense_id) == group_id)
        ]

    async def get_split(self, split_id: str) -> Optional[Split]:
        return self.splits.get(split_id)

    async def update_split_status(self, split: Split) -> bool:
        if split.id not in self.splits:
            return False
        self.splits[split.id] = split
        self.status_updates.append(split)
        return True


@pytest.fixture
def fake_repo() -> FakeLedgerRepository:
    """Repository with Alice, Bob and Carol in a 'Trip' group, no expenses yet."""
    repo = FakeLedgerRepository()
    repo.add_account("alice", "Alice")
    repo.add_account("bob", "Bob")
    repo.add_account("carol", "Carol")
    repo.add_group("trip", "Trip", ["alice", "bob", "carol"])
    return repo


@pytest.fixture
def mock_db():
    """Motor database double; collections are MagicMocks with async methods."""
    db = MagicMock()
    for name in ("users", "groups", "expenses"):
        collection = MagicMock()
        collection.find_one = AsyncMock(return_value=None)
        collection.update_one = AsyncMock()
        setattr(db, name, collection)
    return db


@pytest.fixture
def make_cursor():
    """Build a Motor cursor double whose sort() chains and to_list() yields docs."""
    def _make(docs):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(return_value=docs)
        return cursor
    return _make


@pytest.fixture
def client(fake_repo):
    """TestClient wired to the in-memory repository (lifespan not started)."""
    app.dependency_overrides[get_ledger_repo] = lambda: fake_repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
