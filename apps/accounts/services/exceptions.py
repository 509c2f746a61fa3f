"""Domain-specific exceptions for accounts services."""

from common.exceptions import ServiceError, InvalidStateError


class AccountsServiceError(ServiceError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError, InvalidStateError):
    """Raised when an email address is already registered."""
    pass
