"""
Reception management service.

State machine per PVZ:

    [none] --create--> in_progress --close--> close (terminal)

At most one reception per PVZ is in progress. The rule is enforced twice:
the PVZ row is locked while checking for an open reception, and the
one_open_reception_per_pvz partial unique index rejects a second open row
even if the check is bypassed.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.db import IntegrityError

from apps.core.cache import entity_cache
from apps.core.transactions import TransactionCoordinator, UnitOfWork

from ..exceptions import (
    NoReceptionError,
    ReceptionAlreadyClosedError,
    ReceptionAlreadyOpenError,
)
from ..models import Product, Reception, ReceptionStatus
from ..repository import ProductRepository, ReceptionRepository

logger = logging.getLogger(__name__)

CACHE_KIND = 'reception'


def lock_open_reception(uow: UnitOfWork, pvz_id: UUID) -> Reception:
    """
    Fetch and lock the open reception of a PVZ inside a unit of work.

    Raises:
        PVZNotFoundError: If the PVZ does not exist
        NoReceptionError: If the PVZ has never had a reception
        ReceptionAlreadyClosedError: If the PVZ's last reception is closed
    """
    uow.pvzs.get_by_id(pvz_id)

    reception = uow.receptions.find_open_by_pvz_id(pvz_id, for_update=True)
    if reception is not None:
        return reception

    latest = uow.receptions.find_latest_by_pvz_id(pvz_id)
    if latest is None:
        raise NoReceptionError(
            f"PVZ {pvz_id} has no receptions", entity='pvz', entity_id=pvz_id
        )
    raise ReceptionAlreadyClosedError(
        f"Last reception {latest.id} of PVZ {pvz_id} is already closed",
        entity='reception',
        entity_id=latest.id,
    )


def ensure_open(reception: Reception) -> None:
    """
    Raises:
        ReceptionAlreadyClosedError: If the reception is closed
    """
    if reception.status == ReceptionStatus.CLOSED:
        raise ReceptionAlreadyClosedError(
            f"Reception {reception.id} is already closed",
            entity='reception',
            entity_id=reception.id,
        )


class ReceptionManager:
    """
    Service for opening and closing receptions.

    Args:
        coordinator: TransactionCoordinator for write operations
        cache: EntityCache used by get_by_id
    """

    def __init__(self, coordinator: Optional[TransactionCoordinator] = None, cache=None):
        self.coordinator = coordinator or TransactionCoordinator()
        self.cache = cache or entity_cache
        self.receptions = ReceptionRepository(using=self.coordinator.using)
        self.products = ProductRepository(using=self.coordinator.using)

    def create(self, *, pvz_id: UUID, cancel_event=None) -> Reception:
        """
        Open a new reception at a PVZ.

        Args:
            pvz_id: UUID of the PVZ
            cancel_event: Optional threading.Event to abort before commit

        Returns:
            Created Reception with status in_progress

        Raises:
            PVZNotFoundError: If the PVZ does not exist
            ReceptionAlreadyOpenError: If the PVZ already has an open reception
        """
        def work(uow):
            # Serializes concurrent opens for the same PVZ
            uow.pvzs.get_by_id_for_update(pvz_id)

            existing = uow.receptions.find_open_by_pvz_id(pvz_id)
            if existing is not None:
                raise ReceptionAlreadyOpenError(
                    f"PVZ {pvz_id} already has an open reception",
                    entity='reception',
                    entity_id=existing.id,
                )

            try:
                return uow.receptions.create(pvz_id=pvz_id, status=ReceptionStatus.IN_PROGRESS)
            except IntegrityError:
                raise ReceptionAlreadyOpenError(
                    f"PVZ {pvz_id} already has an open reception",
                    entity='pvz',
                    entity_id=pvz_id,
                )

        try:
            reception = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        except ReceptionAlreadyOpenError:
            logger.warning("Rejected second open reception for PVZ %s", pvz_id)
            raise

        logger.info("Reception %s opened at PVZ %s", reception.id, pvz_id)
        return reception

    def close(self, *, pvz_id: UUID, cancel_event=None) -> Reception:
        """
        Close the open reception of a PVZ. Products are not required.

        Returns:
            The updated Reception with status close

        Raises:
            PVZNotFoundError: If the PVZ does not exist
            NoReceptionError: If the PVZ has never had a reception
            ReceptionAlreadyClosedError: If the PVZ's last reception is already closed
        """
        def work(uow):
            reception = lock_open_reception(uow, pvz_id)
            return uow.receptions.close(reception)

        try:
            reception = self.coordinator.run_in_transaction(work, cancel_event=cancel_event)
        except NoReceptionError:
            logger.warning("Close rejected for PVZ %s: no receptions", pvz_id)
            raise
        except ReceptionAlreadyClosedError as exc:
            logger.warning("Close rejected for PVZ %s: reception %s already closed", pvz_id, exc.entity_id)
            raise

        self.cache.invalidate(CACHE_KIND, reception.id)
        logger.info("Reception %s closed at PVZ %s", reception.id, pvz_id)
        return reception

    def get_by_id(self, *, reception_id: UUID) -> Reception:
        """
        Raises:
            ReceptionNotFoundError: If the reception does not exist
        """
        return self.cache.get_or_load(CACHE_KIND, reception_id, self.receptions.get_by_id)

    def get_open_by_pvz_id(self, *, pvz_id: UUID) -> Reception:
        """
        Raises:
            ReceptionNotFoundError: If the PVZ has no open reception
        """
        return self.receptions.get_open_by_pvz_id(pvz_id)

    def list(self, *, offset: int, limit: int) -> List[Reception]:
        return self.receptions.list(offset=offset, limit=limit)

    def get_products(self, *, reception_id: UUID) -> List[Product]:
        """
        Products of a reception in insertion order.

        Raises:
            ReceptionNotFoundError: If the reception does not exist
        """
        self.receptions.get_by_id(reception_id)
        return self.products.get_by_reception_id(reception_id)
