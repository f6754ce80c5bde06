"""Fixed-point money helpers. All amounts are Decimal with 2 fractional digits."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, Iterable

from bson.decimal128 import Decimal128
from pydantic import Field

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Positive amount as stored on expenses and splits
Money = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


def round_half_up(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """Convert a stored amount (Decimal128, str, int, Decimal) to Decimal."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("float amounts are not accepted")
    return Decimal(str(value))


def money_sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)
