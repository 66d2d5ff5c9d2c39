"""
PVZ management service.

Validates city names, enforces one PVZ per city, restricts mutations to
administrators and records every mutation in the audit log inside the same
transaction as the write.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError

from apps.accounts.repository import UserRepository
from apps.core.cache import entity_cache
from apps.core.pagination import page_to_offset, validate_window
from apps.core.transactions import TransactionCoordinator

from ..exceptions import (
    InvalidCityError,
    InvalidDateRangeError,
    PVZAccessDeniedError,
    PVZAlreadyExistsError,
    PVZInUseError,
)
from ..models import PVZ
from ..repository import PVZRepository

logger = logging.getLogger(__name__)

CITY_MIN_LENGTH = 2
CITY_MAX_LENGTH = 100

CACHE_KIND = 'pvz'


def validate_city(city) -> str:
    """
    Normalize and validate a city name.

    Surrounding whitespace is stripped. The name must be 2-100 characters
    long and, when settings.PVZ_ALLOWED_CITIES is non-empty, one of the
    listed cities.

    Returns:
        The stripped city name

    Raises:
        InvalidCityError: If the name is not acceptable
    """
    if not isinstance(city, str) or not city.strip():
        raise InvalidCityError("City is required", entity='pvz', field='city')

    city = city.strip()
    if not CITY_MIN_LENGTH <= len(city) <= CITY_MAX_LENGTH:
        raise InvalidCityError(
            f"City must be between {CITY_MIN_LENGTH} and {CITY_MAX_LENGTH} characters",
            entity='pvz',
            field='city',
        )

    allowed = getattr(settings, 'PVZ_ALLOWED_CITIES', None)
    if allowed and city not in allowed:
        raise InvalidCityError(
            f"City '{city}' is not allowed. Allowed cities: {', '.join(allowed)}",
            entity='pvz',
            field='city',
        )

    return city


class PVZManager:
    """
    Service for PVZ lifecycle.

    Args:
        coordinator: TransactionCoordinator for write operations
        cache: EntityCache used by get_by_id
    """

    def __init__(self, coordinator: Optional[TransactionCoordinator] = None, cache=None):
        self.coordinator = coordinator or TransactionCoordinator()
        self.cache = cache or entity_cache
        self.pvzs = PVZRepository(using=self.coordinator.using)
        self.users = UserRepository(using=self.coordinator.using)

    def _require_admin(self, user_id: Optional[UUID], action: str):
        if user_id is None:
            raise PVZAccessDeniedError(f"Authentication required to {action} PVZ")

        user = self.users.get_by_id(user_id)
        if not user.can_manage_pvz():
            logger.warning("User %s (role %s) denied: %s PVZ", user.id, user.role, action)
            raise PVZAccessDeniedError(
                f"Only administrators can {action} PVZ", entity='user', entity_id=user.id
            )
        return user

    def create(self, *, city: str, user_id: UUID, cancel_event=None) -> PVZ:
        """
        Create a PVZ and its audit entry atomically.

        Args:
            city: City name
            user_id: ID of the acting user (must be an administrator)
            cancel_event: Optional threading.Event to abort before commit

        Returns:
            Created PVZ with server-assigned id and created_at

        Raises:
            InvalidCityError: If the city is not acceptable
            UserNotFoundError: If user_id does not exist
            PVZAccessDeniedError: If the user is not an administrator
            PVZAlreadyExistsError: If a PVZ for the city exists
        """
        city = validate_city(city)
        user = self._require_admin(user_id, 'create')

        def work(uow):
            if uow.pvzs.find_by_city(city) is not None:
                raise PVZAlreadyExistsError(
                    f"PVZ in {city} already exists", entity='pvz', field='city'
                )
            try:
                pvz = uow.pvzs.create(city=city)
            except IntegrityError:
                # Concurrent creation for the same city
                raise PVZAlreadyExistsError(
                    f"PVZ in {city} already exists", entity='pvz', field='city'
                )
            uow.audit_log.log_pvz_creation(pvz_id=pvz.id, user_id=user.id)
            return pvz

        try:
            pvz = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        except PVZAlreadyExistsError:
            logger.warning("Duplicate PVZ rejected for city %s", city)
            raise

        logger.info("PVZ %s created in %s by %s", pvz.id, pvz.city, user.id)
        return pvz

    def update(self, *, pvz_id: UUID, city: str, moderator_id: UUID, cancel_event=None) -> PVZ:
        """
        Rename a PVZ (administrators only).

        Raises:
            InvalidCityError: If the city is not acceptable
            PVZAccessDeniedError: If the moderator is not an administrator
            PVZNotFoundError: If the PVZ does not exist
            PVZAlreadyExistsError: If another PVZ already uses the city
        """
        city = validate_city(city)
        moderator = self._require_admin(moderator_id, 'update')

        def work(uow):
            pvz = uow.pvzs.get_by_id_for_update(pvz_id)
            if uow.pvzs.find_by_city_excluding(city, pvz.id) is not None:
                raise PVZAlreadyExistsError(
                    f"PVZ in {city} already exists", entity='pvz', field='city'
                )
            try:
                pvz = uow.pvzs.update(pvz, city=city)
            except IntegrityError:
                raise PVZAlreadyExistsError(
                    f"PVZ in {city} already exists", entity='pvz', field='city'
                )
            uow.audit_log.log_pvz_update(pvz_id=pvz.id, user_id=moderator.id)
            return pvz

        pvz = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        self.cache.invalidate(CACHE_KIND, pvz.id)

        logger.info("PVZ %s renamed to %s by %s", pvz.id, pvz.city, moderator.id)
        return pvz

    def delete(self, *, pvz_id: UUID, moderator_id: UUID, cancel_event=None) -> None:
        """
        Delete a PVZ that has no receptions (administrators only).

        Raises:
            PVZAccessDeniedError: If the moderator is not an administrator
            PVZNotFoundError: If the PVZ does not exist
            PVZInUseError: If receptions reference the PVZ
        """
        moderator = self._require_admin(moderator_id, 'delete')

        def work(uow):
            pvz = uow.pvzs.get_by_id_for_update(pvz_id)
            if uow.pvzs.has_receptions(pvz.id):
                raise PVZInUseError(
                    "PVZ with receptions cannot be deleted", entity='pvz', entity_id=pvz.id
                )
            uow.pvzs.delete(pvz.id)
            uow.audit_log.log_pvz_deletion(pvz_id=pvz.id, user_id=moderator.id)

        self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        self.cache.invalidate(CACHE_KIND, pvz_id)

        logger.info("PVZ %s deleted by %s", pvz_id, moderator.id)

    def get_by_id(self, *, pvz_id: UUID) -> PVZ:
        """
        Raises:
            PVZNotFoundError: If the PVZ does not exist
        """
        return self.cache.get_or_load(CACHE_KIND, pvz_id, self.pvzs.get_by_id)

    def get_all(self) -> List[PVZ]:
        return self.pvzs.all()

    def list(self, *, offset: int, limit: int) -> List[PVZ]:
        return self.pvzs.list(offset=offset, limit=limit)

    def get_with_receptions(
        self,
        *,
        start_date=None,
        end_date=None,
        page: int = 1,
        limit: int = 10
    ) -> List[PVZ]:
        """
        Paginated PVZ listing with nested receptions and products.

        Args:
            start_date: Lower bound for reception date_time (inclusive), optional
            end_date: Upper bound for reception date_time (inclusive), optional
            page: 1-based page number
            limit: Page size

        Returns:
            PVZ instances, newest first, each with `filtered_receptions`
            whose items carry `ordered_products`

        Raises:
            InvalidInputError: If page or limit is below 1
            InvalidDateRangeError: If start_date is after end_date
        """
        offset = page_to_offset(page=page, limit=limit)
        validate_window(offset=offset, limit=limit)

        if start_date is not None and end_date is not None and start_date > end_date:
            raise InvalidDateRangeError(
                "start_date must not be after end_date", field='start_date'
            )

        return self.pvzs.get_with_receptions(
            start_date=start_date,
            end_date=end_date,
            offset=offset,
            limit=limit,
        )
