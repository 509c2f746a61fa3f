import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.services import create_group, join_group


def _make_user(email, display_name):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        display_name=display_name,
    )


@pytest.fixture
def alice(db):
    """Group creator."""
    return _make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(db):
    return _make_user('bob@example.com', 'Bob')


@pytest.fixture
def carol(db):
    return _make_user('carol@example.com', 'Carol')


@pytest.fixture
def outsider(db):
    """User not in any group."""
    return _make_user('outsider@example.com', 'Outsider')


@pytest.fixture
def pact_group(alice, bob, carol):
    """Group of Alice, Bob and Carol with a penalty of 1.00."""
    group = create_group(
        name='Gym Pact',
        created_by=alice,
        default_penalty_amount=Decimal('1.00'),
    )
    join_group(invite_code=group.invite_code, user=bob)
    join_group(invite_code=group.invite_code, user=carol)
    return group


@pytest.fixture
def solo_group(alice):
    """Group whose only member is its creator."""
    return create_group(
        name='Solo Pact',
        created_by=alice,
        default_penalty_amount=Decimal('2.50'),
    )


@pytest.fixture
def client_for():
    """Return a factory building a JWT-authenticated API client for a user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()
