"""Ledger validation utilities."""
from typing import Dict, Iterable, List

from decimal import Decimal

from settleup.core.exceptions import InvariantViolationError
from settleup.models.ledger import Expense, Split
from settleup.utils.money import ZERO


def split_totals(splits: Iterable[Split]) -> Dict[str, Decimal]:
    """Sum split amounts per expense id."""
    totals: Dict[str, Decimal] = {}
    for split in splits:
        totals[split.expense_id] = totals.get(split.expense_id, ZERO) + split.amount
    return totals


def validate_expense_splits(expenses: List[Expense], splits: Iterable[Split]) -> None:
    """
    Check that every expense's splits add up to the expense amount.

    Rules:
    - Sum of split amounts must equal the expense amount exactly
    - An expense with no splits sums to 0 and is rejected

    Raises InvariantViolationError for the first expense that fails.
    """
    totals = split_totals(splits)
    for expense in expenses:
        actual = totals.get(expense.id, ZERO)
        if actual != expense.amount:
            raise InvariantViolationError(expense.id, expense.amount, actual)
