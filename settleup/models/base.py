from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """Immutable record handed to the balance engine."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        from_attributes=True
    )
