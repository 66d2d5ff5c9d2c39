"""User registration service."""

import logging

from django.db import transaction, IntegrityError

from apps.accounts.models import User, UserRole

from .exceptions import EmailAlreadyRegisteredError, UserRegistrationError

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    role: str = UserRole.EMPLOYEE
) -> User:
    """
    Register a new user with the given role.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        role: One of UserRole values

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the role is unknown
        EmailAlreadyRegisteredError: If the email is taken
    """
    if role not in UserRole.values:
        raise UserRegistrationError(f"Unknown role: {role}", field='role')

    if User.objects.filter(email__iexact=email).exists():
        raise EmailAlreadyRegisteredError(
            "User with this email already exists", entity='user', field='email'
        )

    try:
        user = User.objects.create_user(email=email, password=password, role=role)
    except IntegrityError:
        # Concurrent registration with the same email
        raise EmailAlreadyRegisteredError(
            "User with this email already exists", entity='user', field='email'
        )

    logger.info("Registered user %s with role %s", user.id, role)
    return user
