"""
Goal status calculation.

Pure functions only: everything needed, including the current time, is
passed in, so the result can be computed for any moment.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class GoalStatus:
    goal_id: UUID
    user_id: UUID
    last_completion: Optional[datetime]
    next_deadline: datetime
    is_overdue: bool
    days_remaining: int
    total_completions: int


def calculate_goal_status(
    goal,
    completions: Iterable,
    user_id: UUID,
    now: datetime,
    anchor: Optional[datetime] = None,
) -> GoalStatus:
    """
    Derive where ``user_id`` stands on ``goal`` at time ``now``.

    The next deadline is ``frequency_days`` after the user's latest
    completion. Completions of other users are ignored, and ties on
    ``completed_at`` go to the higher id. Without any completion the
    deadline counts from ``anchor``, or from ``now`` when no anchor is
    given.

    ``days_remaining`` is rounded up to whole days and is negative once
    the deadline has passed.
    """
    own = [c for c in completions if c.user_id == user_id]
    last = max(own, key=lambda c: (c.completed_at, c.id), default=None)

    if last is not None:
        start = last.completed_at
    else:
        start = anchor or now
    next_deadline = start + timedelta(days=goal.frequency_days)

    return GoalStatus(
        goal_id=goal.id,
        user_id=user_id,
        last_completion=last.completed_at if last is not None else None,
        next_deadline=next_deadline,
        is_overdue=next_deadline < now,
        days_remaining=math.ceil((next_deadline - now) / ONE_DAY),
        total_completions=len(own),
    )
