"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from common.exceptions import (
    ServiceError,
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
)


class GroupsServiceError(ServiceError):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError, NotFoundError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class InvalidInviteCodeError(GroupsServiceError, NotFoundError):
    """Raised when no group matches an invite code."""
    pass


class AlreadyMemberError(GroupsServiceError, InvalidStateError):
    """Raised when a user tries to join a group they're already in."""
    pass


class NotMemberError(GroupsServiceError, UnauthorizedError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class OwnerCannotLeaveError(GroupsServiceError, InvalidStateError):
    """Raised when a group owner tries to leave their group."""
    pass


class OutstandingBalanceError(GroupsServiceError, InvalidStateError):
    """Raised when a member with a non-zero balance or open debts tries to leave."""
    pass


class NotGroupOwnerError(GroupsServiceError, InvalidStateError):
    """Raised when someone other than the creator tries to delete a group."""
    pass


class InsufficientPermissionsError(GroupsServiceError, UnauthorizedError):
    """Raised when a user lacks required permissions for an action."""
    pass
