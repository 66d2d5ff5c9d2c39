"""Services for accounts business logic."""

from .exceptions import (
    UserRegistrationError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InactiveAccountError,
    DummyLoginDisabledError,
    UserNotFoundError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, dummy_login, issue_tokens

__all__ = [
    # Exceptions
    'UserRegistrationError',
    'EmailAlreadyRegisteredError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'DummyLoginDisabledError',
    'UserNotFoundError',
    # Services
    'register_user',
    'authenticate_user',
    'dummy_login',
    'issue_tokens',
]
