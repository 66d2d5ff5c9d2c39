"""User authentication and token issuance."""

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole

from .exceptions import (
    DummyLoginDisabledError,
    InactiveAccountError,
    InvalidCredentialsError,
    UserRegistrationError,
)

logger = logging.getLogger(__name__)

DUMMY_EMAIL_TEMPLATE = 'dummy-{role}@pvz.local'


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email)
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user


def issue_tokens(user: User) -> dict:
    """
    Issue a refresh/access token pair carrying the user's role.

    The role claim is copied into the access token, so adapters can read it
    without a database round trip.
    """
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@transaction.atomic
def dummy_login(*, role: str) -> User:
    """
    Return a shared per-role user for local testing of the API.

    Only available when settings.DUMMY_LOGIN_ENABLED is true.

    Raises:
        DummyLoginDisabledError: If dummy login is switched off
        UserRegistrationError: If the role is unknown
    """
    if not getattr(settings, 'DUMMY_LOGIN_ENABLED', False):
        raise DummyLoginDisabledError("Dummy login is disabled")

    if role not in UserRole.values:
        raise UserRegistrationError(f"Unknown role: {role}", field='role')

    user, created = User.objects.get_or_create(
        email=DUMMY_EMAIL_TEMPLATE.format(role=role),
        defaults={'role': role},
    )
    if created:
        user.set_unusable_password()
        user.save(update_fields=['password'])
        logger.info("Created dummy user for role %s", role)

    return user
