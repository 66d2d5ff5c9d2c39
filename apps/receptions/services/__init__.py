"""
Receptions app services layer.

Reception lifecycle and product intake. Writes lock the PVZ or reception
row inside the transaction coordinator before checking state.
"""

from ..exceptions import (
    ReceptionNotFoundError,
    NoReceptionError,
    ProductNotFoundError,
    ReceptionAlreadyOpenError,
    ReceptionAlreadyClosedError,
    InvalidProductTypeError,
)

from .reception_management import (
    ReceptionManager,
    lock_open_reception,
)

from .product_management import (
    ProductManager,
    validate_product_type,
)


__all__ = [
    # Exceptions
    'ReceptionNotFoundError',
    'NoReceptionError',
    'ProductNotFoundError',
    'ReceptionAlreadyOpenError',
    'ReceptionAlreadyClosedError',
    'InvalidProductTypeError',

    # Reception Management
    'ReceptionManager',
    'lock_open_reception',

    # Product Management
    'ProductManager',
    'validate_product_type',
]
