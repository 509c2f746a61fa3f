"""
Goal status queries.

Loads a member's completions and hands them to calculate_goal_status.
A member who never completed a goal is measured from when the goal
started applying to them: the later of goal creation and their joining.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.groups.services import get_membership

from .goal_management import get_goal_for_member, get_group_goals
from .goal_status import GoalStatus, calculate_goal_status


def _status_for(goal, completions, membership, now):
    anchor = max(goal.created_at, membership.joined_at)
    return calculate_goal_status(
        goal,
        completions,
        membership.user_id,
        now,
        anchor=anchor,
    )


def get_goal_status(
    *,
    goal_id: UUID,
    user: User,
    now: Optional[datetime] = None
) -> GoalStatus:
    """
    Status of one goal for the user.

    Raises:
        GoalNotFoundError: If goal doesn't exist
        NotMemberError: If user is not a member of the goal's group
    """
    goal = get_goal_for_member(goal_id=goal_id, user=user)
    membership = get_membership(group_id=goal.group_id, user=user)
    completions = list(goal.completions.filter(user=user))
    return _status_for(goal, completions, membership, now or timezone.now())


def get_group_goal_statuses(
    *,
    group_id: UUID,
    user: User,
    now: Optional[datetime] = None
) -> List[GoalStatus]:
    """
    Status of every active goal of a group for the user.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    membership = get_membership(group_id=group_id, user=user)
    now = now or timezone.now()
    return [
        _status_for(goal, goal.completions.all(), membership, now)
        for goal in get_group_goals(group_id=group_id, user=user)
    ]
