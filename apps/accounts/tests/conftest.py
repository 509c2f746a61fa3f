import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User

PASSWORD = 'PactPass123!'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def pact_member(db):
    """Member who has already shared where to send settlements."""
    return User.objects.create_user(
        email='dana@example.com',
        password=PASSWORD,
        display_name='Dana',
        payment_link='https://paypal.me/dana',
    )


@pytest.fixture
def lapsed_member(db):
    """Deactivated account."""
    return User.objects.create_user(
        email='eli@example.com',
        password=PASSWORD,
        display_name='Eli',
        is_active=False,
    )


@pytest.fixture
def member_client(pact_member):
    client = APIClient()
    refresh = RefreshToken.for_user(pact_member)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
