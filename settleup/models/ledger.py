"""
Ledger records - the inputs of the balance engine.

Design principles:
- An expense and all of its splits are created together by the caller
- The only mutable state is a split's settled flag (and settled_at stamp)
- Records are frozen; status changes produce new values
- All amounts are Decimal with 2 fractional digits
"""

from typing import Optional, Tuple
from datetime import datetime
from pydantic import Field, model_validator

from settleup.models.base import LedgerModel, _utcnow
from settleup.utils.money import Money


class Account(LedgerModel):
    """A person taking part in one or more groups."""
    id: str
    name: str


class Group(LedgerModel):
    """
    A set of accounts sharing costs.

    member_ids is ordered by join order; ties in settlement matching
    follow this order.
    """
    id: str
    name: str
    member_ids: Tuple[str, ...] = ()

    def has_member(self, account_id: str) -> bool:
        return account_id in self.member_ids


class Expense(LedgerModel):
    """Money one account actually paid out on behalf of a group."""
    id: str
    group_id: str
    payer_id: str
    amount: Money
    description: str = ""
    expense_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)


class Split(LedgerModel):
    """
    Portion of one expense attributed to one debtor.

    Invariants:
    - settled_at is set iff settled is true
    - Splits of one expense sum to the expense amount
    """
    id: str
    expense_id: str
    debtor_id: str
    amount: Money
    settled: bool = False
    settled_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_settled_at(self):
        if self.settled and self.settled_at is None:
            raise ValueError("settled split requires settled_at")
        if not self.settled and self.settled_at is not None:
            raise ValueError("unsettled split cannot carry settled_at")
        return self

    def mark_settled(self, at: Optional[datetime] = None) -> "Split":
        """Settle the split. Already settled splits keep their original stamp."""
        if self.settled:
            return self
        return self.model_copy(update={"settled": True, "settled_at": at or _utcnow()})

    def mark_unsettled(self) -> "Split":
        if not self.settled:
            return self
        return self.model_copy(update={"settled": False, "settled_at": None})
