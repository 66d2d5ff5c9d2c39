import pytest
from rest_framework.test import APIClient

from apps.accounts.models import User, UserRole
from apps.accounts.services import issue_tokens
from apps.core.cache import entity_cache


@pytest.fixture(autouse=True)
def clear_entity_cache():
    """Entity cache is process-wide; keep tests independent of each other."""
    entity_cache.clear()
    yield
    entity_cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return an administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def employee_user(db):
    """Create and return a pickup point employee."""
    return User.objects.create_user(
        email='employee@example.com',
        password='TestPass123!',
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def plain_user(db):
    """Create and return a user without PVZ permissions."""
    return User.objects.create_user(
        email='user@example.com',
        password='TestPass123!',
        role=UserRole.USER,
    )


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(user)['access']}")
    return client


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the administrator."""
    return _client_for(admin_user)


@pytest.fixture
def employee_client(employee_user):
    """Return an API client authenticated as the employee."""
    return _client_for(employee_user)


@pytest.fixture
def user_client(plain_user):
    """Return an API client authenticated as a plain user."""
    return _client_for(plain_user)
