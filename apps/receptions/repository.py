"""Reception and product repositories."""

from typing import List, Optional, Sequence

from django.db.models import Max, Subquery
from django.utils import timezone

from apps.core.repositories import ModelRepository

from .exceptions import ProductNotFoundError, ReceptionNotFoundError
from .models import Product, Reception, ReceptionStatus


class ReceptionRepository(ModelRepository):
    model = Reception
    entity_name = 'reception'
    not_found_error = ReceptionNotFoundError
    ordering = ('-date_time', 'id')

    def find_open_by_pvz_id(self, pvz_id, *, for_update: bool = False) -> Optional[Reception]:
        queryset = self.queryset.filter(pvz_id=pvz_id, status=ReceptionStatus.IN_PROGRESS)
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.first()

    def find_latest_by_pvz_id(self, pvz_id) -> Optional[Reception]:
        """Most recently opened reception of a PVZ, in any status."""
        return self.queryset.filter(pvz_id=pvz_id).order_by('-date_time').first()

    def get_open_by_pvz_id(self, pvz_id) -> Reception:
        reception = self.find_open_by_pvz_id(pvz_id)
        if reception is None:
            raise self.not_found_error(
                f"No open reception for PVZ {pvz_id}", entity='pvz', entity_id=pvz_id
            )
        return reception

    def close(self, reception: Reception) -> Reception:
        return self.update(reception, status=ReceptionStatus.CLOSED)


class ProductRepository(ModelRepository):
    model = Product
    entity_name = 'product'
    not_found_error = ProductNotFoundError
    ordering = ('reception_id', 'sequence')

    def get_by_reception_id(self, reception_id) -> List[Product]:
        return list(self.queryset.filter(reception_id=reception_id).order_by('sequence'))

    def next_sequence(self, reception_id) -> int:
        """Next insertion number. Caller must hold the reception row lock."""
        current = (
            self.queryset
            .filter(reception_id=reception_id)
            .aggregate(max_sequence=Max('sequence'))['max_sequence']
        )
        return (current or 0) + 1

    def create_batch(self, *, reception_id, product_types: Sequence[str]) -> List[Product]:
        """
        Insert products in the given order, each stamped with the current time.

        Caller must hold the reception row lock.
        """
        start = self.next_sequence(reception_id)
        products = [
            Product(
                reception_id=reception_id,
                type=product_type,
                date_time=timezone.now(),
                sequence=start + index,
            )
            for index, product_type in enumerate(product_types)
        ]
        return self.queryset.bulk_create(products)

    def newest_first(self, reception_id):
        """Products of a reception, most recently added first."""
        return (
            self.queryset
            .filter(reception_id=reception_id)
            .order_by('-date_time', '-sequence')
        )

    def get_last(self, reception_id) -> Product:
        """Most recently added product: latest date_time, then highest sequence."""
        product = self.newest_first(reception_id).first()
        if product is None:
            raise self.not_found_error(
                f"Reception {reception_id} has no products",
                entity='reception',
                entity_id=reception_id,
            )
        return product

    def delete_last(self, reception_id) -> Product:
        """
        Delete and return the most recently added product.

        The DELETE picks its row itself:
        DELETE ... WHERE id IN (SELECT id ... ORDER BY date_time DESC, sequence DESC LIMIT 1).
        Caller must hold the reception row lock, so the product read first
        is the row that statement removes.
        """
        product = self.get_last(reception_id)
        newest = self.newest_first(reception_id).values('pk')[:1]
        deleted, _ = self.queryset.filter(pk__in=Subquery(newest)).delete()
        if not deleted:
            raise self.not_found(product.pk)
        return product
