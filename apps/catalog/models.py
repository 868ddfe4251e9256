from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Category(models.Model):
    """A work stage that may point at the next stage of its pipeline."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)

    # Forward pointer of the pipeline; no cycle check is done on write
    next_category = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='previous_categories'
    )
    order = models.IntegerField(default=0)

    created_by = models.CharField(max_length=64, default='anonymous')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        ordering = ['order', 'name']
        indexes = [
            models.Index(fields=['order']),
        ]

    def __str__(self):
        return self.name


class Rate(models.Model):
    """A priced line item owned by one category."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name='rates'
    )
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    default_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    unit = models.CharField(max_length=20)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'category_rates'
        ordering = ['position', 'created_at']

    def __str__(self):
        return f"{self.name} ({self.default_price}/{self.unit})"


class LookupValue(models.Model):
    """Flat named value selectable elsewhere in the application."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    created_by = models.CharField(max_length=64, default='anonymous')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class PaymentGroup(LookupValue):
    """Administrative grouping label attached to farmers for payment routing."""

    class Meta(LookupValue.Meta):
        db_table = 'payment_groups'


class CropType(LookupValue):

    class Meta(LookupValue.Meta):
        db_table = 'crop_types'


class WorkType(LookupValue):

    class Meta(LookupValue.Meta):
        db_table = 'work_types'
