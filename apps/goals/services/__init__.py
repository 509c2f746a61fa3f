"""
Goals app services layer.

Usage:
    from apps.goals.services import log_goal_completion, get_goal_status
"""

from .exceptions import (
    GoalsServiceError,
    GoalNotFoundError,
    CompletionNotFoundError,
    NotGoalCreatorError,
    NotCompletionOwnerError,
    GoalInactiveError,
    GoalScheduleConflictError,
)

from .goal_status import GoalStatus, calculate_goal_status

from .goal_management import (
    create_goal,
    update_goal,
    deactivate_goal,
    delete_goal,
    get_goal_for_member,
    get_group_goals,
)

from .completions import (
    log_goal_completion,
    delete_goal_completion,
    get_goal_completions,
    get_completions_for_date,
)

from .goal_tracking import get_goal_status, get_group_goal_statuses


__all__ = [
    # Exceptions
    'GoalsServiceError',
    'GoalNotFoundError',
    'CompletionNotFoundError',
    'NotGoalCreatorError',
    'NotCompletionOwnerError',
    'GoalInactiveError',
    'GoalScheduleConflictError',

    # Status
    'GoalStatus',
    'calculate_goal_status',
    'get_goal_status',
    'get_group_goal_statuses',

    # Goal Management
    'create_goal',
    'update_goal',
    'deactivate_goal',
    'delete_goal',
    'get_goal_for_member',
    'get_group_goals',

    # Completions
    'log_goal_completion',
    'delete_goal_completion',
    'get_goal_completions',
    'get_completions_for_date',
]
