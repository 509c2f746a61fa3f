"""
Goal management service.

Any member may create a goal in their group; only its creator may change,
deactivate or delete it.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Prefetch, QuerySet

from apps.accounts.models import User
from apps.goals.models import Goal, GoalCompletion, GoalType, GOAL_TYPE_DAYS
from apps.groups.services import get_membership

from .exceptions import GoalNotFoundError, NotGoalCreatorError, GoalScheduleConflictError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'name',
    'description',
    'emoji',
    'goal_type',
    'frequency_days',
    'penalty_amount',
)


@transaction.atomic
def create_goal(
    *,
    group_id: UUID,
    user: User,
    name: str,
    description: str = '',
    emoji: str = '🎯',
    goal_type: str = GoalType.FREQUENCY,
    frequency_days: int = 1,
    penalty_amount: Optional[Decimal] = None
) -> Goal:
    """
    Create a goal in a group.

    Args:
        group_id: Group the goal belongs to
        user: Member creating the goal
        name: Short goal name
        description: Optional details
        emoji: Icon shown next to the goal
        goal_type: frequency, daily or weekly; daily and weekly fix
            frequency_days to 1 and 7
        frequency_days: Days allowed between completions
        penalty_amount: Defaults to the group's default penalty

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    membership = get_membership(group_id=group_id, user=user)
    group = membership.group

    goal = Goal.objects.create(
        group=group,
        name=name,
        description=description,
        emoji=emoji,
        goal_type=goal_type,
        frequency_days=frequency_days,
        penalty_amount=(
            penalty_amount if penalty_amount is not None else group.default_penalty_amount
        ),
        created_by=user,
    )

    logger.info("Goal %s created in group %s by %s", goal.id, group.id, user.id)
    return goal


def get_goal_for_member(*, goal_id: UUID, user: User) -> Goal:
    """
    Return a goal of one of the user's groups.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotMemberError: If user is not a member of the goal's group
    """
    try:
        goal = Goal.objects.select_related('group').get(id=goal_id)
    except Goal.DoesNotExist:
        raise GoalNotFoundError(f"Goal with ID {goal_id} not found")

    get_membership(group_id=goal.group_id, user=user)
    return goal


def _get_goal_for_creator(goal_id, user):
    try:
        goal = Goal.objects.select_for_update().get(id=goal_id)
    except Goal.DoesNotExist:
        raise GoalNotFoundError(f"Goal with ID {goal_id} not found")

    if goal.created_by_id != user.id:
        raise NotGoalCreatorError("Only the goal creator can change this goal")
    return goal


@transaction.atomic
def update_goal(*, goal_id: UUID, user: User, **changes) -> Goal:
    """
    Update goal details (creator only).

    Only keys in UPDATABLE_FIELDS are applied; others are ignored.
    Setting frequency_days alone on a daily or weekly goal turns it into
    a frequency goal.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotGoalCreatorError: If user did not create the goal
        GoalScheduleConflictError: If a daily or weekly goal_type is sent
            together with a different frequency_days
    """
    goal = _get_goal_for_creator(goal_id, user)

    goal_type = changes.get('goal_type')
    frequency_days = changes.get('frequency_days')
    if frequency_days is not None:
        if goal_type is None and goal.goal_type in GOAL_TYPE_DAYS:
            changes['goal_type'] = GoalType.FREQUENCY
        elif goal_type in GOAL_TYPE_DAYS and GOAL_TYPE_DAYS[goal_type] != frequency_days:
            raise GoalScheduleConflictError(
                f"A {goal_type} goal always repeats every {GOAL_TYPE_DAYS[goal_type]} day(s)"
            )

    update_fields = ['updated_at']
    for field in UPDATABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(goal, field, changes[field])
            update_fields.append(field)

    # save() may rewrite frequency_days for daily and weekly goals
    if 'goal_type' in update_fields and 'frequency_days' not in update_fields:
        update_fields.append('frequency_days')

    goal.save(update_fields=update_fields)
    return goal


@transaction.atomic
def deactivate_goal(*, goal_id: UUID, user: User) -> Goal:
    """
    Soft-delete a goal; its completions are kept.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotGoalCreatorError: If user did not create the goal
    """
    goal = _get_goal_for_creator(goal_id, user)
    goal.is_active = False
    goal.save(update_fields=['is_active', 'updated_at'])

    logger.info("Goal %s deactivated by %s", goal.id, user.id)
    return goal


@transaction.atomic
def delete_goal(*, goal_id: UUID, user: User) -> None:
    """
    Delete a goal and all its completions (creator only).

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotGoalCreatorError: If user did not create the goal
    """
    goal = _get_goal_for_creator(goal_id, user)

    logger.info("Goal %s deleted by %s", goal.id, user.id)
    goal.delete()


def get_group_goals(
    *,
    group_id: UUID,
    user: User,
    include_inactive: bool = False
) -> QuerySet[Goal]:
    """
    Goals of a group with their completions prefetched, oldest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    get_membership(group_id=group_id, user=user)

    goals = Goal.objects.filter(group_id=group_id)
    if not include_inactive:
        goals = goals.filter(is_active=True)

    return goals.select_related('created_by').prefetch_related(
        Prefetch(
            'completions',
            queryset=GoalCompletion.objects.select_related('user').order_by('-completed_at', '-id')
        )
    ).order_by('created_at')
