"""
Product management service.

Products are added to and removed from the open reception of a PVZ. Every
write locks the reception row first, so adding a product, deleting the last
one and closing the reception never interleave for the same reception.
Deletion is strictly LIFO: only the most recently added product can go.
"""

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from apps.core.cache import entity_cache
from apps.core.exceptions import InvalidInputError
from apps.core.transactions import TransactionCoordinator

from ..exceptions import InvalidProductTypeError
from ..models import Product, ProductType
from ..repository import ProductRepository, ReceptionRepository
from .reception_management import ensure_open, lock_open_reception

logger = logging.getLogger(__name__)

CACHE_KIND = 'product'


def validate_product_type(product_type) -> str:
    """
    Normalize a product type to its stored value.

    Both the stored values ('electronics') and the display labels
    ('электроника') are accepted.

    Raises:
        InvalidProductTypeError: If the type is outside the allowed set
    """
    value = ProductType.normalize(product_type)
    if value not in ProductType.values:
        raise InvalidProductTypeError(
            f"Invalid product type '{product_type}'. "
            f"Allowed: {', '.join(ProductType.values)}",
            entity='product',
            field='type',
        )
    return value


class ProductManager:
    """
    Service for adding and removing products in receptions.

    Args:
        coordinator: TransactionCoordinator for write operations
        cache: EntityCache used by get_by_id
    """

    def __init__(self, coordinator: Optional[TransactionCoordinator] = None, cache=None):
        self.coordinator = coordinator or TransactionCoordinator()
        self.cache = cache or entity_cache
        self.receptions = ReceptionRepository(using=self.coordinator.using)
        self.products = ProductRepository(using=self.coordinator.using)

    def create(self, *, reception_id: UUID, product_type: str, cancel_event=None) -> Product:
        """
        Add one product to an open reception.

        Raises:
            ReceptionNotFoundError: If the reception does not exist
            ReceptionAlreadyClosedError: If the reception is closed
            InvalidProductTypeError: If the type is not allowed
        """
        products = self.create_batch(
            reception_id=reception_id,
            product_types=[product_type],
            cancel_event=cancel_event,
        )
        return products[0]

    def create_batch(
        self,
        *,
        reception_id: UUID,
        product_types: Sequence[str],
        cancel_event=None
    ) -> List[Product]:
        """
        Add several products to an open reception, all or nothing.

        Args:
            reception_id: UUID of the reception
            product_types: Types in insertion order; must not be empty
            cancel_event: Optional threading.Event to abort before commit

        Returns:
            Created products in the given order

        Raises:
            InvalidInputError: If product_types is empty
            ReceptionNotFoundError: If the reception does not exist
            ReceptionAlreadyClosedError: If the reception is closed
            InvalidProductTypeError: If any type is not allowed
        """
        if not product_types:
            raise InvalidInputError(
                "At least one product type is required", entity='product', field='types'
            )

        def work(uow):
            reception = uow.receptions.get_by_id_for_update(reception_id)
            ensure_open(reception)
            values = [validate_product_type(product_type) for product_type in product_types]
            return uow.products.create_batch(reception_id=reception.id, product_types=values)

        products = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)

        logger.info("Added %d product(s) to reception %s", len(products), reception_id)
        return products

    def create_for_pvz(self, *, pvz_id: UUID, product_type: str, cancel_event=None) -> Product:
        """
        Add one product to whichever reception is open at the PVZ.

        Raises:
            PVZNotFoundError: If the PVZ does not exist
            NoReceptionError: If the PVZ has never had a reception
            ReceptionAlreadyClosedError: If the PVZ's last reception is closed
            InvalidProductTypeError: If the type is not allowed
        """
        def work(uow):
            reception = lock_open_reception(uow, pvz_id)
            value = validate_product_type(product_type)
            return uow.products.create_batch(
                reception_id=reception.id, product_types=[value]
            )[0]

        product = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)

        logger.info("Added %s to reception %s at PVZ %s", product.type, product.reception_id, pvz_id)
        return product

    def delete_last(self, *, reception_id: UUID, cancel_event=None) -> Product:
        """
        Remove the most recently added product of an open reception.

        Returns:
            The deleted product (detached from the database)

        Raises:
            ReceptionNotFoundError: If the reception does not exist
            ReceptionAlreadyClosedError: If the reception is closed
            ProductNotFoundError: If the reception has no products
        """
        def work(uow):
            reception = uow.receptions.get_by_id_for_update(reception_id)
            ensure_open(reception)
            return uow.products.delete_last(reception.id)

        product = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        self.cache.invalidate(CACHE_KIND, product.id)

        logger.info("Removed product %s from reception %s", product.id, reception_id)
        return product

    def delete_last_for_pvz(self, *, pvz_id: UUID, cancel_event=None) -> Product:
        """
        Remove the most recently added product of the PVZ's open reception.

        Raises:
            PVZNotFoundError: If the PVZ does not exist
            NoReceptionError: If the PVZ has never had a reception
            ReceptionAlreadyClosedError: If the PVZ's last reception is closed
            ProductNotFoundError: If the open reception has no products
        """
        def work(uow):
            reception = lock_open_reception(uow, pvz_id)
            return uow.products.delete_last(reception.id)

        product = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        self.cache.invalidate(CACHE_KIND, product.id)

        logger.info("Removed product %s from PVZ %s", product.id, pvz_id)
        return product

    def get_by_id(self, *, product_id: UUID) -> Product:
        """
        Raises:
            ProductNotFoundError: If the product does not exist
        """
        return self.cache.get_or_load(CACHE_KIND, product_id, self.products.get_by_id)

    def get_by_reception_id(self, *, reception_id: UUID) -> List[Product]:
        """
        Raises:
            ReceptionNotFoundError: If the reception does not exist
        """
        self.receptions.get_by_id(reception_id)
        return self.products.get_by_reception_id(reception_id)

    def list(self, *, offset: int, limit: int) -> List[Product]:
        return self.products.list(offset=offset, limit=limit)
