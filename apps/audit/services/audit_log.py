"""
Audit log service.

Writes go through the unit of work that performs the PVZ mutation, so the
entry commits or rolls back together with it.
"""

import logging
from typing import List
from uuid import UUID

from django.db import DEFAULT_DB_ALIAS

from apps.core.transactions import in_unit_of_work

from ..models import AuditLogEntry, OperationType

logger = logging.getLogger(__name__)


class AuditLog:
    """
    Append-only audit log bound to one database alias.

    Obtained as uow.audit_log inside TransactionCoordinator.run_in_transaction.
    Calling a log_* method outside a unit of work raises RuntimeError.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def _append(self, operation_type: str, pvz_id: UUID, user_id: UUID) -> AuditLogEntry:
        if not in_unit_of_work():
            raise RuntimeError("Audit entries must be written inside a unit of work")

        entry = AuditLogEntry(operation_type=operation_type, pvz_id=pvz_id, user_id=user_id)
        entry.save(using=self.using)

        logger.debug("Audit %s: pvz=%s user=%s", operation_type, pvz_id, user_id)
        return entry

    def log_pvz_creation(self, *, pvz_id: UUID, user_id: UUID) -> AuditLogEntry:
        return self._append(OperationType.PVZ_CREATION, pvz_id, user_id)

    def log_pvz_update(self, *, pvz_id: UUID, user_id: UUID) -> AuditLogEntry:
        return self._append(OperationType.PVZ_UPDATE, pvz_id, user_id)

    def log_pvz_deletion(self, *, pvz_id: UUID, user_id: UUID) -> AuditLogEntry:
        return self._append(OperationType.PVZ_DELETION, pvz_id, user_id)

    def entries_for_pvz(self, pvz_id: UUID) -> List[AuditLogEntry]:
        """All entries for a PVZ, oldest first."""
        return list(
            AuditLogEntry.objects.using(self.using)
            .filter(pvz_id=pvz_id)
            .order_by('created_at')
        )
