from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, computed_field

from settleup.models.base import _utcnow


class UserBalance(BaseModel):
    """One member's figures within a group."""
    user_id: str
    user_name: str
    total_paid: Decimal
    total_owed: Decimal
    net_balance: Decimal  # Positive = is owed money, negative = owes money


class SettlementView(BaseModel):
    """Suggested transfer with display names resolved."""
    from_user_id: str
    from_user_name: str
    to_user_id: str
    to_user_name: str
    amount: Decimal


class BalanceReport(BaseModel):
    """Balances and suggested settlements for one group."""
    group_id: str
    group_name: str
    user_balances: List[UserBalance] = Field(default_factory=list)
    settlements: List[SettlementView] = Field(default_factory=list)
    total_group_expenses: Decimal = Decimal("0.00")
    timestamp: datetime = Field(default_factory=_utcnow)


class UserBalanceSummaryResponse(BaseModel):
    """A user's net balance in every group they belong to."""
    user_id: str
    group_balances: Dict[str, Decimal]
    timestamp: datetime = Field(default_factory=_utcnow)

    @computed_field
    @property
    def total_net_balance(self) -> Decimal:
        return sum(self.group_balances.values(), Decimal("0.00"))


class AmountResponse(BaseModel):
    amount: Decimal
    timestamp: datetime = Field(default_factory=_utcnow)


class SettlementStatusResponse(BaseModel):
    """
    is_fully_settled is true when no money needs to move in the group.
    Individual splits may still be flagged unsettled.
    """
    group_id: str
    is_fully_settled: bool
    timestamp: datetime = Field(default_factory=_utcnow)


class SplitResponse(BaseModel):
    """Split status as returned after settle/unsettle."""
    id: str
    expense_id: str
    debtor_id: str
    amount: Decimal
    settled: bool
    settled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
