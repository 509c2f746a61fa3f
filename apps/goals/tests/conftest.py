import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.goals.services import create_goal
from apps.groups.services import create_group, join_group


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def goal_owner(db):
    """Creates the group and its goals."""
    return User.objects.create_user(
        email='coach@example.com',
        password='TestPass123!',
        display_name='Coach',
    )


@pytest.fixture
def goal_member(db):
    return User.objects.create_user(
        email='runner@example.com',
        password='TestPass123!',
        display_name='Runner',
    )


@pytest.fixture
def goal_outsider(db):
    return User.objects.create_user(
        email='stranger@example.com',
        password='TestPass123!',
        display_name='Stranger',
    )


@pytest.fixture
def goal_group(goal_owner, goal_member):
    group = create_group(
        name='Running Club',
        created_by=goal_owner,
        default_penalty_amount=Decimal('1.50'),
    )
    join_group(invite_code=group.invite_code, user=goal_member)
    return group


@pytest.fixture
def goal(goal_group, goal_owner):
    """Run at least once every 3 days."""
    return create_goal(
        group_id=goal_group.id,
        user=goal_owner,
        name='Run',
        emoji='🏃',
        frequency_days=3,
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner_client(goal_owner):
    return _client_for(goal_owner)


@pytest.fixture
def member_client(goal_member):
    return _client_for(goal_member)


@pytest.fixture
def outsider_client(goal_outsider):
    return _client_for(goal_outsider)
