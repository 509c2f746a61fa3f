"""
Domain-specific exceptions for goals app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""

from common.exceptions import (
    ServiceError,
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
)


class GoalsServiceError(ServiceError):
    """Base exception for all goals service errors."""
    pass


class GoalNotFoundError(GoalsServiceError, NotFoundError):
    """Raised when a goal does not exist."""
    pass


class CompletionNotFoundError(GoalsServiceError, NotFoundError):
    """Raised when a goal completion does not exist."""
    pass


class NotGoalCreatorError(GoalsServiceError, UnauthorizedError):
    """Raised when someone other than the creator changes or deletes a goal."""
    pass


class NotCompletionOwnerError(GoalsServiceError, UnauthorizedError):
    """Raised when a user tries to undo someone else's completion."""
    pass


class GoalInactiveError(GoalsServiceError, InvalidStateError):
    """Raised when logging a completion for a deactivated goal."""
    pass


class GoalScheduleConflictError(GoalsServiceError, InvalidStateError):
    """Raised when a daily or weekly goal is given a different frequency."""
    pass
