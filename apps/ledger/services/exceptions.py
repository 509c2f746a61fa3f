"""
Domain-specific exceptions for ledger app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from common.exceptions import (
    ServiceError,
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
    TransientStoreError,
)


class LedgerServiceError(ServiceError):
    """Base exception for all ledger service errors."""
    pass


class TransactionNotFoundError(LedgerServiceError, NotFoundError):
    """Raised when a transaction does not exist."""
    pass


class NotTransactionPartyError(LedgerServiceError, UnauthorizedError):
    """Raised when a user who is neither party nor group creator settles a debt."""
    pass


class TransactionAlreadySettledError(LedgerServiceError, InvalidStateError):
    """Raised when settling a transaction that is already paid."""
    pass


class SettlementPartyMissingError(LedgerServiceError, InvalidStateError):
    """Raised when a party of the transaction is no longer a group member."""
    pass


class LedgerStoreUnavailableError(LedgerServiceError, TransientStoreError):
    """Raised when the database could not complete a ledger update."""
    pass
