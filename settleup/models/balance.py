"""Derived values. Never persisted; recomputed on every request."""
from decimal import Decimal
from pydantic import Field

from settleup.models.base import LedgerModel


class NetBalance(LedgerModel):
    """
    An account's position in one group.

    net = total_paid - total_owed
    Positive = net creditor (is owed money)
    Negative = net debtor (owes money)
    """
    account_id: str
    total_paid: Decimal
    total_owed: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_paid - self.total_owed


class Settlement(LedgerModel):
    """Proposed transfer: from_account_id pays to_account_id."""
    from_account_id: str
    to_account_id: str
    amount: Decimal = Field(gt=0)
