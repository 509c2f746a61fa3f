"""
Service layer unit tests for goals app.

Tests cover:
- Goal creation rules and type normalization
- Creator-only changes
- Completion logging and undo
- Status anchored at goal creation or membership start
"""

import pytest
from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from uuid import uuid4

from apps.goals.models import Goal, GoalCompletion, GoalType
from apps.goals.services import (
    create_goal,
    update_goal,
    deactivate_goal,
    delete_goal,
    get_goal_for_member,
    get_group_goals,
    log_goal_completion,
    delete_goal_completion,
    get_goal_completions,
    get_completions_for_date,
    get_goal_status,
    get_group_goal_statuses,
)
from apps.goals.services.exceptions import (
    GoalNotFoundError,
    GoalScheduleConflictError,
    CompletionNotFoundError,
    NotGoalCreatorError,
    NotCompletionOwnerError,
    GoalInactiveError,
)
from apps.groups.models import GroupMembership
from apps.groups.services.exceptions import NotMemberError, GroupNotFoundError

T = datetime(2026, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


# =============================================================================
# Goal Management Tests
# =============================================================================

@pytest.mark.django_db
class TestGoalManagement:
    """Tests for goal_management.py service functions."""

    def test_create_goal_defaults_to_group_penalty(self, goal_group, goal_member):
        goal = create_goal(group_id=goal_group.id, user=goal_member, name='Read')

        assert goal.penalty_amount == Decimal('1.50')
        assert goal.goal_type == GoalType.FREQUENCY
        assert goal.frequency_days == 1
        assert goal.emoji == '🎯'
        assert goal.is_active is True
        assert goal.created_by == goal_member

    def test_create_goal_with_explicit_penalty(self, goal_group, goal_member):
        goal = create_goal(
            group_id=goal_group.id,
            user=goal_member,
            name='Meditate',
            penalty_amount=Decimal('0.00'),
        )

        assert goal.penalty_amount == Decimal('0.00')

    def test_named_types_fix_frequency(self, goal_group, goal_owner):
        daily = create_goal(group_id=goal_group.id, user=goal_owner, name='Floss',
                            goal_type=GoalType.DAILY, frequency_days=5)
        weekly = create_goal(group_id=goal_group.id, user=goal_owner, name='Call mom',
                             goal_type=GoalType.WEEKLY)

        assert daily.frequency_days == 1
        assert weekly.frequency_days == 7

    def test_non_member_cannot_create(self, goal_group, goal_outsider):
        with pytest.raises(NotMemberError):
            create_goal(group_id=goal_group.id, user=goal_outsider, name='Sneaky')

    def test_missing_group(self, goal_owner):
        with pytest.raises(GroupNotFoundError):
            create_goal(group_id=uuid4(), user=goal_owner, name='Nowhere')

    def test_update_goal_by_creator(self, goal, goal_owner):
        updated = update_goal(goal_id=goal.id, user=goal_owner, name='Long run', frequency_days=4)

        assert updated.name == 'Long run'
        assert updated.frequency_days == 4

    def test_update_goal_type_to_weekly(self, goal, goal_owner):
        update_goal(goal_id=goal.id, user=goal_owner, goal_type=GoalType.WEEKLY)

        goal.refresh_from_db()
        assert goal.frequency_days == 7

    def test_update_frequency_of_daily_goal(self, goal_group, goal_owner):
        daily = create_goal(group_id=goal_group.id, user=goal_owner, name='Floss', goal_type=GoalType.DAILY)

        update_goal(goal_id=daily.id, user=goal_owner, frequency_days=5)

        daily.refresh_from_db()
        assert daily.goal_type == GoalType.FREQUENCY
        assert daily.frequency_days == 5

    def test_update_conflicting_schedule(self, goal, goal_owner):
        with pytest.raises(GoalScheduleConflictError):
            update_goal(goal_id=goal.id, user=goal_owner, goal_type=GoalType.WEEKLY, frequency_days=5)

        goal.refresh_from_db()
        assert goal.goal_type == GoalType.FREQUENCY
        assert goal.frequency_days == 3

    def test_update_matching_schedule(self, goal, goal_owner):
        updated = update_goal(goal_id=goal.id, user=goal_owner, goal_type=GoalType.WEEKLY, frequency_days=7)

        assert updated.frequency_days == 7

    def test_update_goal_by_other_member(self, goal, goal_member):
        with pytest.raises(NotGoalCreatorError):
            update_goal(goal_id=goal.id, user=goal_member, name='Walk')

    def test_update_missing_goal(self, goal_owner):
        with pytest.raises(GoalNotFoundError):
            update_goal(goal_id=uuid4(), user=goal_owner, name='Ghost')

    def test_deactivate_goal(self, goal, goal_group, goal_owner):
        deactivate_goal(goal_id=goal.id, user=goal_owner)

        assert list(get_group_goals(group_id=goal_group.id, user=goal_owner)) == []
        assert len(get_group_goals(group_id=goal_group.id, user=goal_owner, include_inactive=True)) == 1

    def test_deactivate_by_other_member(self, goal, goal_member):
        with pytest.raises(NotGoalCreatorError):
            deactivate_goal(goal_id=goal.id, user=goal_member)

    def test_delete_goal_removes_completions(self, goal, goal_owner, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member)

        delete_goal(goal_id=goal.id, user=goal_owner)

        assert not Goal.objects.filter(id=goal.id).exists()
        assert GoalCompletion.objects.count() == 0

    def test_delete_goal_by_other_member(self, goal, goal_member):
        with pytest.raises(NotGoalCreatorError):
            delete_goal(goal_id=goal.id, user=goal_member)

    def test_get_goal_for_member(self, goal, goal_member, goal_outsider):
        assert get_goal_for_member(goal_id=goal.id, user=goal_member) == goal

        with pytest.raises(NotMemberError):
            get_goal_for_member(goal_id=goal.id, user=goal_outsider)

    def test_group_goals_prefetch_completions(self, goal, goal_group, goal_owner, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member)
        log_goal_completion(goal_id=goal.id, user=goal_owner)

        goals = list(get_group_goals(group_id=goal_group.id, user=goal_member))

        assert len(goals) == 1
        assert len(goals[0].completions.all()) == 2


# =============================================================================
# Completion Tests
# =============================================================================

@pytest.mark.django_db
class TestCompletions:
    """Tests for completions.py service functions."""

    def test_log_completion(self, goal, goal_member):
        completion = log_goal_completion(
            goal_id=goal.id,
            user=goal_member,
            notes='5k',
            proof_photo_url='https://cdn.example.com/run.jpg',
        )

        assert completion.user == goal_member
        assert completion.goal == goal
        assert completion.notes == '5k'
        assert completion.completed_at is not None

    def test_completion_ids_increase(self, goal, goal_member):
        first = log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)
        second = log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        assert second.id > first.id

    def test_non_member_cannot_complete(self, goal, goal_outsider):
        with pytest.raises(NotMemberError):
            log_goal_completion(goal_id=goal.id, user=goal_outsider)

    def test_inactive_goal_cannot_be_completed(self, goal, goal_owner, goal_member):
        deactivate_goal(goal_id=goal.id, user=goal_owner)

        with pytest.raises(GoalInactiveError):
            log_goal_completion(goal_id=goal.id, user=goal_member)

    def test_undo_own_completion(self, goal, goal_member):
        completion = log_goal_completion(goal_id=goal.id, user=goal_member)

        delete_goal_completion(completion_id=completion.id, user=goal_member)

        assert not GoalCompletion.objects.filter(id=completion.id).exists()

    def test_cannot_undo_others_completion(self, goal, goal_owner, goal_member):
        completion = log_goal_completion(goal_id=goal.id, user=goal_member)

        with pytest.raises(NotCompletionOwnerError):
            delete_goal_completion(completion_id=completion.id, user=goal_owner)

    def test_undo_missing_completion(self, goal_member):
        with pytest.raises(CompletionNotFoundError):
            delete_goal_completion(completion_id=999999, user=goal_member)

    def test_goal_completions_newest_first(self, goal, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T + timedelta(days=1))

        completions = list(get_goal_completions(goal_id=goal.id, user=goal_member))

        assert [c.completed_at for c in completions] == [T + timedelta(days=1), T]

    def test_completions_for_date(self, goal, goal_group, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T + timedelta(days=1))

        on_day = get_completions_for_date(group_id=goal_group.id, user=goal_member, day=date(2026, 3, 1))

        assert [c.completed_at for c in on_day] == [T]


# =============================================================================
# Status Tests
# =============================================================================

@pytest.mark.django_db
class TestGoalStatus:
    """Tests for goal_tracking.py service functions."""

    def _backdate(self, goal, membership_user, goal_created, joined):
        Goal.objects.filter(id=goal.id).update(created_at=goal_created)
        GroupMembership.objects.filter(group=goal.group, user=membership_user).update(joined_at=joined)

    def test_status_from_last_completion(self, goal, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        status = get_goal_status(goal_id=goal.id, user=goal_member, now=T + timedelta(days=2))

        assert status.days_remaining == 1
        assert status.is_overdue is False
        assert status.total_completions == 1

    def test_never_completed_counts_from_joining(self, goal, goal_member):
        self._backdate(goal, goal_member, goal_created=T, joined=T + timedelta(days=2))

        status = get_goal_status(goal_id=goal.id, user=goal_member, now=T + timedelta(days=4))

        assert status.next_deadline == T + timedelta(days=5)
        assert status.days_remaining == 1
        assert status.is_overdue is False

    def test_never_completed_counts_from_goal_creation(self, goal, goal_member):
        self._backdate(goal, goal_member, goal_created=T + timedelta(days=1), joined=T)

        status = get_goal_status(goal_id=goal.id, user=goal_member, now=T + timedelta(days=6))

        assert status.next_deadline == T + timedelta(days=4)
        assert status.is_overdue is True
        assert status.days_remaining == -2

    def test_other_members_completions_do_not_count(self, goal, goal_owner, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_owner, completed_at=T)

        status = get_goal_status(goal_id=goal.id, user=goal_member, now=T)

        assert status.total_completions == 0
        assert status.last_completion is None

    def test_status_requires_membership(self, goal, goal_outsider):
        with pytest.raises(NotMemberError):
            get_goal_status(goal_id=goal.id, user=goal_outsider)

    def test_status_missing_goal(self, goal_member):
        with pytest.raises(GoalNotFoundError):
            get_goal_status(goal_id=uuid4(), user=goal_member)

    def test_group_statuses(self, goal, goal_group, goal_owner, goal_member):
        other = create_goal(group_id=goal_group.id, user=goal_owner, name='Stretch', goal_type=GoalType.DAILY)
        deactivate_goal(goal_id=other.id, user=goal_owner)
        create_goal(group_id=goal_group.id, user=goal_owner, name='Sleep', goal_type=GoalType.WEEKLY)
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        statuses = get_group_goal_statuses(group_id=goal_group.id, user=goal_member, now=T)

        assert len(statuses) == 2
        by_goal = {s.goal_id: s for s in statuses}
        assert by_goal[goal.id].total_completions == 1
        assert by_goal[goal.id].days_remaining == 3
