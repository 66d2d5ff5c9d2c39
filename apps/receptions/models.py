from django.db import models
from django.db.models import Q
from django.utils import timezone
import uuid


class ReceptionStatus(models.TextChoices):
    IN_PROGRESS = 'in_progress', 'In progress'
    CLOSED = 'close', 'Closed'


class ProductType(models.TextChoices):
    ELECTRONICS = 'electronics', 'электроника'
    CLOTHING = 'clothing', 'одежда'
    SHOES = 'shoes', 'обувь'

    @classmethod
    def normalize(cls, value):
        """Map a Russian label to its value; anything else is returned unchanged."""
        for choice_value, label in cls.choices:
            if value == label:
                return choice_value
        return value


class Reception(models.Model):
    """Goods-receiving session at a PVZ. At most one is in progress per PVZ."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date_time = models.DateTimeField(default=timezone.now)
    pvz = models.ForeignKey('pvz.PVZ', on_delete=models.PROTECT, related_name='receptions')
    status = models.CharField(
        max_length=20,
        choices=ReceptionStatus.choices,
        default=ReceptionStatus.IN_PROGRESS,
    )

    class Meta:
        db_table = 'receptions'
        constraints = [
            models.UniqueConstraint(
                fields=['pvz'],
                condition=Q(status='in_progress'),
                name='one_open_reception_per_pvz',
            ),
        ]
        indexes = [
            models.Index(fields=['pvz', 'status'], name='receptions_pvz_status_idx'),
            models.Index(fields=['date_time'], name='receptions_date_time_idx'),
        ]
        ordering = ['-date_time']

    def __str__(self):
        return f"Reception {self.id} at {self.pvz_id} ({self.status})"

    @property
    def is_open(self):
        return self.status == ReceptionStatus.IN_PROGRESS


class Product(models.Model):
    """Item scanned into a reception. `sequence` is the insertion order within it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date_time = models.DateTimeField(default=timezone.now)
    type = models.CharField(max_length=20, choices=ProductType.choices)
    reception = models.ForeignKey(Reception, on_delete=models.CASCADE, related_name='products')
    sequence = models.PositiveIntegerField(editable=False)

    class Meta:
        db_table = 'products'
        constraints = [
            models.UniqueConstraint(
                fields=['reception', 'sequence'],
                name='unique_product_sequence_per_reception',
            ),
        ]
        indexes = [
            models.Index(fields=['reception', 'date_time'], name='products_reception_time_idx'),
        ]
        ordering = ['reception', 'sequence']

    def __str__(self):
        return f"{self.type} #{self.sequence} in {self.reception_id}"
