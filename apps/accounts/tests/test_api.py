import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.models import User, UserRole


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'role': 'admin',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['role'] == 'admin'
        assert User.objects.get(email='newuser@example.com').role == UserRole.ADMIN

    def test_register_defaults_to_employee(self, api_client):
        """Role is optional and defaults to employee."""
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='minimal@example.com').role == UserRole.EMPLOYEE

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'already_exists'

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_unknown_role(self, api_client):
        """Registration fails with a role outside the allowed set."""
        url = reverse('users:register')
        data = {
            'email': 'role@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'role': 'moderator',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'role' in response.data


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Login returns tokens carrying the role claim."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        token = AccessToken(response.data['tokens']['access'])
        assert token['role'] == 'employee'

    def test_login_wrong_password(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'access_denied'

    def test_login_nonexistent_user(self, api_client):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_inactive_user(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        assert user.last_login is None

        url = reverse('users:login')
        api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        user.refresh_from_db()
        assert user.last_login is not None


# =============================================================================
# Dummy Login Tests
# =============================================================================

@pytest.mark.django_db
class TestDummyLogin:
    """Tests for POST /api/auth/dummy-login/"""

    def test_dummy_login_disabled_by_default(self, api_client):
        url = reverse('users:dummy-login')
        response = api_client.post(url, {'role': 'employee'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_dummy_login_issues_token_for_role(self, api_client, dummy_login_enabled):
        url = reverse('users:dummy-login')
        response = api_client.post(url, {'role': 'admin'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['role'] == 'admin'
        assert AccessToken(response.data['tokens']['access'])['role'] == 'admin'

    def test_dummy_login_reuses_user(self, api_client, dummy_login_enabled):
        url = reverse('users:dummy-login')
        api_client.post(url, {'role': 'employee'})
        api_client.post(url, {'role': 'employee'})

        assert User.objects.filter(role=UserRole.EMPLOYEE).count() == 1

    def test_dummy_login_unknown_role(self, api_client, dummy_login_enabled):
        url = reverse('users:dummy-login')
        response = api_client.post(url, {'role': 'root'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, employee_client, employee_user):
        url = reverse('users:current-user')
        response = employee_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == employee_user.email
        assert response.data['role'] == 'employee'

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
