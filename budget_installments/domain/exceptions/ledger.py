"""Ledger-related domain exceptions."""

from .base import ConflictException, NotFoundException, ValidationException


class LedgerNotFoundException(NotFoundException):
    """Raised when a ledger cannot be found for the caller."""

    def __init__(self, ledger_id: str):
        super().__init__(
            message=f"Ledger not found: {ledger_id}",
            code="LEDGER_NOT_FOUND",
        )
        self.ledger_id = ledger_id


class AccountNotFoundException(NotFoundException):
    """Raised when an account is missing from the ledger."""

    def __init__(self, account_id: str):
        super().__init__(
            message=f"Account not found: {account_id}",
            code="ACCOUNT_NOT_FOUND",
        )
        self.account_id = account_id


class TransactionNotFoundException(NotFoundException):
    """Raised when a ledger transaction is missing from the ledger."""

    def __init__(self, transaction_id: str):
        super().__init__(
            message=f"Transaction not found: {transaction_id}",
            code="TRANSACTION_NOT_FOUND",
        )
        self.transaction_id = transaction_id


class InvalidAccountKindException(ValidationException):
    """Raised when an account has the wrong kind for its role."""

    def __init__(self, account_id: str, expected: str):
        super().__init__(
            message=f"Account {account_id} must be a {expected} account",
            code="INVALID_ACCOUNT_KIND",
        )
        self.account_id = account_id
        self.expected = expected


class PaymentCategoryConflictException(ConflictException):
    """Raised when the payment category name is taken by a non-category account."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Account '{name}' exists but is not a budget category",
            code="PAYMENT_CATEGORY_CONFLICT",
        )
        self.name = name
