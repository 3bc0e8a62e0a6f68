import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserType


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test buyer."""
    return User.objects.create_user(
        email='jane.doe@example.com',
        password='TestPass123!',
        username='janedoe',
        first_name='Jane',
        last_name='Doe',
    )


@pytest.fixture
def buyer_alice(db):
    """Create and return a buyer with a username."""
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        username='alicegreen',
        first_name='Alice',
        last_name='Green',
        profile_image='https://cdn.example.com/alice.png',
    )


@pytest.fixture
def buyer_without_username(db):
    """Create and return a buyer addressed by email prefix."""
    return User.objects.create_user(
        email='monstera.fan@example.com',
        password='TestPass123!',
        first_name='Mona',
        last_name='Stera',
    )


@pytest.fixture
def seller(db):
    """Create and return a seller (never a candidate)."""
    return User.objects.create_user(
        email='alice.shop@example.com',
        password='TestPass123!',
        username='aliceshop',
        user_type=UserType.SELLER,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive buyer."""
    return User.objects.create_user(
        email='alice.old@example.com',
        password='TestPass123!',
        username='aliceold',
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as the test buyer."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
