"""
Transaction coordinator.

Runs a unit of work atomically. The callable receives a UnitOfWork handle
whose repositories are bound to the database alias of the open transaction;
every write inside the unit goes through that handle, so nothing escapes the
transaction.

    coordinator = TransactionCoordinator()

    def work(uow):
        pvz = uow.pvzs.create(city='Москва')
        uow.audit_log.log_pvz_creation(pvz_id=pvz.id, user_id=user.id)
        return pvz

    pvz = coordinator.run_in_transaction(work)

Commit happens when the callable returns, rollback when it raises (the
exception is re-raised unchanged). Nested calls are a programming error and
raise RuntimeError.
"""

import logging
import threading
from functools import cached_property
from typing import Callable, Optional, TypeVar

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from .exceptions import InternalError, OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar('T')

_state = threading.local()


class UnitOfWork:
    """Handle for one open transaction. Repositories are created on first use."""

    def __init__(self, using: str):
        self.using = using

    @cached_property
    def pvzs(self):
        from apps.pvz.repository import PVZRepository
        return PVZRepository(using=self.using)

    @cached_property
    def receptions(self):
        from apps.receptions.repository import ReceptionRepository
        return ReceptionRepository(using=self.using)

    @cached_property
    def products(self):
        from apps.receptions.repository import ProductRepository
        return ProductRepository(using=self.using)

    @cached_property
    def users(self):
        from apps.accounts.repository import UserRepository
        return UserRepository(using=self.using)

    @cached_property
    def audit_log(self):
        from apps.audit.services import AuditLog
        return AuditLog(using=self.using)


def _raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError("Operation cancelled before commit")


class TransactionCoordinator:
    """
    Runs callables inside transaction.atomic() on one database alias.

    Args:
        using: Database alias; defaults to 'default'
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def run_in_transaction(
        self,
        fn: Callable[[UnitOfWork], T],
        *,
        cancel_event: Optional[threading.Event] = None
    ) -> T:
        """
        Run fn(uow) atomically and return its result.

        Args:
            fn: Unit of work; receives the UnitOfWork handle
            cancel_event: Optional event; if set before the unit starts or
                before it commits, the transaction is rolled back

        Returns:
            Whatever fn returns

        Raises:
            RuntimeError: If called from inside another unit of work
            OperationCancelledError: If cancel_event was set
            InternalError: If the database fails with an error fn did not handle
        """
        if getattr(_state, 'active', False):
            raise RuntimeError("run_in_transaction cannot be nested")

        _raise_if_cancelled(cancel_event)

        _state.active = True
        try:
            with transaction.atomic(using=self.using):
                result = fn(UnitOfWork(self.using))
                # Raising here unwinds the atomic block, so nothing commits
                _raise_if_cancelled(cancel_event)
            return result
        except DatabaseError as exc:
            logger.exception("Unit of work failed on database '%s'", self.using)
            raise InternalError("Database operation failed") from exc
        finally:
            _state.active = False


def in_unit_of_work() -> bool:
    """Return True when the current thread is inside run_in_transaction."""
    return getattr(_state, 'active', False)
