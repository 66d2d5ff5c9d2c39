from django.db import models
from django.utils import timezone
import uuid


class OperationType(models.TextChoices):
    PVZ_CREATION = 'pvz_creation', 'PVZ creation'
    PVZ_UPDATE = 'pvz_update', 'PVZ update'
    PVZ_DELETION = 'pvz_deletion', 'PVZ deletion'


class AuditLogEntryQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise RuntimeError('Audit log entries are append-only')

    def delete(self):
        raise RuntimeError('Audit log entries are append-only')


class AuditLogEntry(models.Model):
    """
    Append-only record of a PVZ mutation.

    pvz_id and user_id are plain UUIDs, not foreign keys, so entries outlive
    the PVZ they describe.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operation_type = models.CharField(max_length=20, choices=OperationType.choices)
    pvz_id = models.UUIDField()
    user_id = models.UUIDField()
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    objects = AuditLogEntryQuerySet.as_manager()

    class Meta:
        db_table = 'audit_log'
        verbose_name = 'audit log entry'
        verbose_name_plural = 'audit log entries'
        indexes = [
            models.Index(fields=['pvz_id', 'created_at'], name='audit_log_pvz_created_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.operation_type} of {self.pvz_id} by {self.user_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError('Audit log entries are append-only')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError('Audit log entries are append-only')
