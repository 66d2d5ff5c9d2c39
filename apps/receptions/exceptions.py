"""
Domain-specific exceptions for the receptions app.

Exception Hierarchy (kind in brackets):
    ReceptionNotFoundError          [not_found]
    NoReceptionError                [not_found]
    ProductNotFoundError            [not_found]
    ReceptionAlreadyOpenError       [already_open]
    ReceptionAlreadyClosedError     [already_closed]
    InvalidProductTypeError         [invalid_input]
"""

from apps.core.exceptions import (
    AlreadyClosedError,
    AlreadyOpenError,
    InvalidInputError,
    NotFoundError,
)


class ReceptionNotFoundError(NotFoundError):
    """Raised when a reception does not exist."""
    pass


class NoReceptionError(NotFoundError):
    """Raised when a PVZ has never had a reception."""
    pass


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist, or a reception has no products left."""
    pass


class ReceptionAlreadyOpenError(AlreadyOpenError):
    """Raised when opening a reception while another one is in progress at the PVZ."""
    pass


class ReceptionAlreadyClosedError(AlreadyClosedError):
    """Raised when closing or changing a reception that is already closed."""
    pass


class InvalidProductTypeError(InvalidInputError):
    """Raised when a product type is outside the allowed set."""
    pass
