"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
)


class UserRegistrationError(InvalidInputError):
    """Raised when user registration fails."""
    pass


class EmailAlreadyRegisteredError(AlreadyExistsError):
    """Raised when an email is already taken."""
    pass


class InvalidCredentialsError(AccessDeniedError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccessDeniedError):
    """Raised when account is deactivated."""
    pass


class DummyLoginDisabledError(AccessDeniedError):
    """Raised when dummy login is requested while it is switched off."""
    pass


class UserNotFoundError(NotFoundError):
    """Raised when user does not exist."""
    pass
