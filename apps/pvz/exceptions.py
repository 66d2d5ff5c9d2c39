"""
Domain-specific exceptions for the pvz app.

These exceptions represent business rule violations and are turned into
HTTP responses by apps.core.handlers.
"""

from apps.core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
)


class PVZNotFoundError(NotFoundError):
    """Raised when a PVZ does not exist."""
    pass


class PVZAlreadyExistsError(AlreadyExistsError):
    """Raised when a PVZ for the city is already registered."""
    pass


class InvalidCityError(InvalidInputError):
    """Raised when the city name is empty, too short, too long or not allowed."""
    pass


class InvalidDateRangeError(InvalidInputError):
    """Raised when start_date is after end_date."""
    pass


class PVZInUseError(InvalidInputError):
    """Raised when deleting a PVZ that already has receptions."""
    pass


class PVZAccessDeniedError(AccessDeniedError):
    """Raised when the user's role does not allow managing PVZ."""
    pass
