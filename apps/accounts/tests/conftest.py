import pytest
from apps.accounts.models import User, UserRole


@pytest.fixture
def user(db):
    """Create and return a test employee."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        is_active=False,
    )


@pytest.fixture
def dummy_login_enabled(settings):
    settings.DUMMY_LOGIN_ENABLED = True
