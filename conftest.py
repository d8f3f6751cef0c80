import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a client user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        first_name='Test',
        last_name='User',
        phone='0340000001',
    )


@pytest.fixture
def other_user(db):
    """Create and return another client user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        first_name='Other',
        last_name='User',
        phone='0340000002',
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        email='staff@example.com',
        password='StaffPass123!',
        first_name='Staff',
        role=UserRole.STAFF,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        first_name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(user):
    """Return an API client authenticated as the client user (JWT)."""
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def staff_client(staff_user):
    return _client_for(staff_user)


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as an ADMIN user."""
    return _client_for(admin_user)
