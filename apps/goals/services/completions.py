"""
Goal completion service.

Members log completions of their groups' goals and may undo their own.
"""

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.goals.models import GoalCompletion
from apps.groups.services import get_membership

from .exceptions import (
    CompletionNotFoundError,
    GoalInactiveError,
    NotCompletionOwnerError,
)
from .goal_management import get_goal_for_member

logger = logging.getLogger(__name__)


def log_goal_completion(
    *,
    goal_id: UUID,
    user: User,
    completed_at: Optional[datetime] = None,
    proof_photo_url: str = '',
    notes: str = ''
) -> GoalCompletion:
    """
    Record that the user completed a goal.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotMemberError: If user is not a member of the goal's group
        GoalInactiveError: If the goal was deactivated
    """
    goal = get_goal_for_member(goal_id=goal_id, user=user)
    if not goal.is_active:
        raise GoalInactiveError(f"Goal '{goal.name}' is no longer active")

    completion = GoalCompletion.objects.create(
        goal=goal,
        user=user,
        completed_at=completed_at or timezone.now(),
        proof_photo_url=proof_photo_url,
        notes=notes,
    )

    logger.info("User %s completed goal %s", user.id, goal.id)
    return completion


def delete_goal_completion(*, completion_id: int, user: User) -> None:
    """
    Undo one of the user's own completions.

    Raises:
        CompletionNotFoundError: If completion doesn't exist
        NotCompletionOwnerError: If the completion belongs to someone else
    """
    try:
        completion = GoalCompletion.objects.get(id=completion_id)
    except GoalCompletion.DoesNotExist:
        raise CompletionNotFoundError(f"Completion with ID {completion_id} not found")

    if completion.user_id != user.id:
        raise NotCompletionOwnerError("You can only undo your own completions")

    completion.delete()


def get_goal_completions(*, goal_id: UUID, user: User) -> QuerySet[GoalCompletion]:
    """
    All completions of a goal by any member, newest first.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotMemberError: If user is not a member of the goal's group
    """
    goal = get_goal_for_member(goal_id=goal_id, user=user)
    return goal.completions.select_related('user').order_by('-completed_at', '-id')


def get_completions_for_date(
    *,
    group_id: UUID,
    user: User,
    day: date
) -> QuerySet[GoalCompletion]:
    """
    Completions of the group's goals on a calendar day (server time zone).

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    get_membership(group_id=group_id, user=user)
    return (
        GoalCompletion.objects
        .filter(goal__group_id=group_id, completed_at__date=day)
        .select_related('goal', 'user')
        .order_by('completed_at', 'id')
    )
