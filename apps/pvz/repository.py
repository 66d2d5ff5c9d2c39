"""PVZ repository."""

from typing import List, Optional

from django.db.models import Prefetch, Q

from apps.core.repositories import ModelRepository
from apps.receptions.models import Product, Reception

from .models import PVZ
from .exceptions import PVZNotFoundError


class PVZRepository(ModelRepository):
    model = PVZ
    entity_name = 'pvz'
    not_found_error = PVZNotFoundError
    ordering = ('-created_at', 'id')

    def find_by_city(self, city: str) -> Optional[PVZ]:
        return self.queryset.filter(city=city).first()

    def find_by_city_excluding(self, city: str, pvz_id) -> Optional[PVZ]:
        return self.queryset.filter(city=city).exclude(pk=pvz_id).first()

    def has_receptions(self, pvz_id) -> bool:
        return Reception.objects.using(self.using).filter(pvz_id=pvz_id).exists()

    def get_with_receptions(self, *, start_date=None, end_date=None, offset: int, limit: int) -> List[PVZ]:
        """
        Page of PVZ with their receptions and products.

        A PVZ qualifies when it has at least one reception whose date_time
        falls inside [start_date, end_date]; with no dates at all, every PVZ
        qualifies. PVZ are ordered newest first and the window is applied to
        PVZ rows, not to joined reception rows.

        Each returned PVZ carries `filtered_receptions` (in-range receptions,
        oldest first) and each of those carries `ordered_products`
        (insertion order).
        """
        reception_filter = Q()
        if start_date is not None:
            reception_filter &= Q(date_time__gte=start_date)
        if end_date is not None:
            reception_filter &= Q(date_time__lte=end_date)

        receptions = Reception.objects.using(self.using).filter(reception_filter)

        pvzs = self.queryset
        if start_date is not None or end_date is not None:
            pvzs = pvzs.filter(pk__in=receptions.values('pvz_id'))

        return list(
            pvzs
            .order_by(*self.ordering)
            .prefetch_related(
                Prefetch(
                    'receptions',
                    queryset=(
                        receptions
                        .order_by('date_time', 'id')
                        .prefetch_related(
                            Prefetch(
                                'products',
                                queryset=Product.objects.using(self.using).order_by('sequence'),
                                to_attr='ordered_products',
                            )
                        )
                    ),
                    to_attr='filtered_receptions',
                )
            )[offset:offset + limit]
        )
