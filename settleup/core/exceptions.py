"""Ledger error kinds shared by the engine, services and routers."""


class LedgerError(Exception):
    """Base class for ledger errors."""
    pass


class NotFoundError(LedgerError):
    """A referenced group, user or split id does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found with id: {identifier}")


class InvariantViolationError(LedgerError):
    """An expense's splits do not add up to the expense amount."""

    def __init__(self, expense_id: str, expected, actual):
        self.expense_id = expense_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Split amounts ({actual}) do not equal expense amount ({expected}) "
            f"for expense {expense_id}"
        )
