"""Errors raised by the expense ledger."""


class ExpenseValidationError(ValueError):
    """Raised when an expense is rejected before it reaches the ledger."""

    message = "Invalid expense"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class InvalidCategoryError(ExpenseValidationError):
    """Category is not one of the predefined expense categories."""

    message = "Invalid category"


class InvalidAmountError(ExpenseValidationError):
    """Amount is zero or negative."""

    message = "Amount must be positive"
