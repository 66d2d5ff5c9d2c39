from django.db import models
from django.utils import timezone
import uuid


class PVZ(models.Model):
    """Pickup point where shipped goods are received and handed to customers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    city = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = 'pvz'
        verbose_name = 'PVZ'
        verbose_name_plural = 'PVZ'
        indexes = [
            models.Index(fields=['created_at'], name='pvz_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.city} ({self.id})"
