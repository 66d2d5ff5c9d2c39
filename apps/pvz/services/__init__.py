"""
PVZ app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations run through the transaction coordinator.
"""

from ..exceptions import (
    PVZNotFoundError,
    PVZAlreadyExistsError,
    InvalidCityError,
    InvalidDateRangeError,
    PVZInUseError,
    PVZAccessDeniedError,
)

from .pvz_management import (
    PVZManager,
    validate_city,
)


__all__ = [
    # Exceptions
    'PVZNotFoundError',
    'PVZAlreadyExistsError',
    'InvalidCityError',
    'InvalidDateRangeError',
    'PVZInUseError',
    'PVZAccessDeniedError',

    # PVZ Management
    'PVZManager',
    'validate_city',
]
