import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from uuid import uuid4
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.goals.models import Goal, GoalCompletion
from apps.goals.services import log_goal_completion

T = datetime(2026, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


@pytest.mark.django_db
class TestGoalCrud:
    """Tests for /api/goals/"""

    def test_create_goal(self, member_client, goal_group, goal_member):
        url = reverse('goals:goal-list')
        response = member_client.post(url, {
            'group': str(goal_group.id),
            'name': 'Push-ups',
            'frequency_days': 2,
            'penalty_amount': '3.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['frequency_days'] == 2
        assert response.data['penalty_amount'] == '3.00'
        assert response.data['created_by']['id'] == str(goal_member.id)

    def test_create_goal_non_member(self, outsider_client, goal_group):
        url = reverse('goals:goal-list')
        response = outsider_client.post(url, {'group': str(goal_group.id), 'name': 'Nope'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_goal_zero_frequency_rejected(self, member_client, goal_group):
        url = reverse('goals:goal-list')
        response = member_client.post(url, {
            'group': str(goal_group.id),
            'name': 'Never',
            'frequency_days': 0,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_goals_with_completions(self, member_client, goal, goal_group, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member)

        url = reverse('goals:goal-list')
        response = member_client.get(url, {'group': str(goal_group.id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert len(response.data[0]['completions']) == 1

    def test_list_goals_requires_group(self, member_client):
        response = member_client.get(reverse('goals:goal-list'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_goal(self, member_client, goal):
        url = reverse('goals:goal-detail', kwargs={'pk': goal.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Run'

    def test_retrieve_missing_goal(self, member_client):
        url = reverse('goals:goal-detail', kwargs={'pk': uuid4()})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_goal_creator_only(self, owner_client, member_client, goal):
        url = reverse('goals:goal-detail', kwargs={'pk': goal.id})

        assert member_client.patch(url, {'name': 'Walk'}, format='json').status_code == status.HTTP_403_FORBIDDEN

        response = owner_client.patch(url, {'name': 'Sprint'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Sprint'

    def test_update_conflicting_schedule(self, owner_client, goal):
        url = reverse('goals:goal-detail', kwargs={'pk': goal.id})
        response = owner_client.patch(url, {'goal_type': 'weekly', 'frequency_days': 5}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_deactivate_goal(self, owner_client, goal):
        url = reverse('goals:goal-deactivate', kwargs={'pk': goal.id})
        response = owner_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_active'] is False

    def test_delete_goal(self, owner_client, goal):
        url = reverse('goals:goal-detail', kwargs={'pk': goal.id})
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Goal.objects.filter(id=goal.id).exists()


@pytest.mark.django_db
class TestGoalCompletion:
    """Tests for completion endpoints."""

    def test_complete_goal(self, member_client, goal, goal_member):
        url = reverse('goals:goal-complete', kwargs={'pk': goal.id})
        response = member_client.post(url, {'notes': 'Easy 5k'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['notes'] == 'Easy 5k'
        assert GoalCompletion.objects.filter(goal=goal, user=goal_member).count() == 1

    def test_complete_in_the_future_rejected(self, member_client, goal, goal_member):
        url = reverse('goals:goal-complete', kwargs={'pk': goal.id})
        ahead = timezone.now() + timedelta(days=3650)
        response = member_client.post(url, {'completed_at': ahead.isoformat()}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'completed_at' in response.data
        assert not GoalCompletion.objects.filter(goal=goal, user=goal_member).exists()

    def test_complete_backdated(self, member_client, goal, goal_member):
        url = reverse('goals:goal-complete', kwargs={'pk': goal.id})
        earlier = timezone.now() - timedelta(hours=5)
        response = member_client.post(url, {'completed_at': earlier.isoformat()}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        completion = GoalCompletion.objects.get(goal=goal, user=goal_member)
        assert abs(completion.completed_at - earlier) < timedelta(seconds=1)

    def test_complete_inactive_goal(self, owner_client, member_client, goal):
        owner_client.post(reverse('goals:goal-deactivate', kwargs={'pk': goal.id}))

        url = reverse('goals:goal-complete', kwargs={'pk': goal.id})
        response = member_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_complete_as_outsider(self, outsider_client, goal):
        url = reverse('goals:goal-complete', kwargs={'pk': goal.id})
        response = outsider_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_goal_completions(self, owner_client, goal, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member)

        url = reverse('goals:goal-completions', kwargs={'pk': goal.id})
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['user']['id'] == str(goal_member.id)

    def test_delete_own_completion(self, member_client, goal, goal_member):
        completion = log_goal_completion(goal_id=goal.id, user=goal_member)

        url = reverse('goals:delete-completion', kwargs={'completion_id': completion.id})
        response = member_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not GoalCompletion.objects.filter(id=completion.id).exists()

    def test_delete_others_completion(self, owner_client, goal, goal_member):
        completion = log_goal_completion(goal_id=goal.id, user=goal_member)

        url = reverse('goals:delete-completion', kwargs={'completion_id': completion.id})
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_completions_by_date(self, member_client, goal, goal_group, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        url = reverse('goals:goal-by-date')
        response = member_client.get(url, {'group': str(goal_group.id), 'date': '2026-03-01'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1


@pytest.mark.django_db
class TestGoalStatusApi:
    """Tests for GET /api/goals/{id}/status/"""

    def test_status_on_track(self, member_client, goal, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        url = reverse('goals:goal-status', kwargs={'pk': goal.id})
        response = member_client.get(url, {'now': (T + timedelta(days=2)).isoformat()})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['days_remaining'] == 1
        assert response.data['is_overdue'] is False
        assert response.data['total_completions'] == 1

    def test_status_overdue(self, member_client, goal, goal_member):
        log_goal_completion(goal_id=goal.id, user=goal_member, completed_at=T)

        url = reverse('goals:goal-status', kwargs={'pk': goal.id})
        response = member_client.get(url, {'now': (T + timedelta(days=4)).isoformat()})

        assert response.data['days_remaining'] == -1
        assert response.data['is_overdue'] is True

    def test_status_invalid_now(self, member_client, goal):
        url = reverse('goals:goal-status', kwargs={'pk': goal.id})
        response = member_client.get(url, {'now': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_status_outsider(self, outsider_client, goal):
        url = reverse('goals:goal-status', kwargs={'pk': goal.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_group_statuses(self, member_client, goal, goal_group):
        url = reverse('goals:goal-statuses')
        response = member_client.get(url, {'group': str(goal_group.id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['goal_id'] == str(goal.id)
