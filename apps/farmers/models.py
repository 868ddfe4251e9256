from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Farmer(models.Model):
    """A farmer the office contracts with."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, db_index=True)
    phone_number = models.CharField(max_length=20, db_index=True)

    # Name of a catalog PaymentGroup, kept as a label
    payment_group = models.CharField(max_length=100, blank=True, db_index=True)
    personal_id = models.CharField(max_length=20, blank=True)

    address = models.JSONField(default=dict, blank=True)
    # Copied from address['subdistrict'] on save for searching
    subdistrict = models.CharField(max_length=100, blank=True, db_index=True)
    bank_info = models.JSONField(default=dict, blank=True)

    memo = models.TextField(blank=True)
    created_by = models.CharField(max_length=64, default='anonymous')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farmers'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.phone_number})"

    def save(self, *args, **kwargs):
        self.subdistrict = (self.address or {}).get('subdistrict', '') or ''
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'address' in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['subdistrict']
        super().save(*args, **kwargs)


class Field(models.Model):
    """A plot of land belonging to a farmer, with its own stage history."""

    DEFAULT_STAGE = '계약예정'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farmer = models.ForeignKey(
        Farmer,
        on_delete=models.CASCADE,
        related_name='fields'
    )
    address = models.JSONField(default=dict, blank=True)
    area_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    area_unit = models.CharField(max_length=10, default='평')
    crop_type = models.CharField(max_length=100, blank=True, db_index=True)
    estimated_harvest_date = models.DateField(null=True, blank=True)

    current_stage = models.CharField(max_length=50, default=DEFAULT_STAGE)
    stage_updated_at = models.DateTimeField(null=True, blank=True)
    # Append-only list of {stage, timestamp, by}
    stage_history = models.JSONField(default=list, blank=True)

    # Flag-numbered sub-plots: {id, address, flag_number, area, crop_type, note}
    locations = models.JSONField(default=list, blank=True)

    memo = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fields'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['farmer', 'crop_type']),
        ]

    def __str__(self):
        return f"{self.farmer.name} - {self.address.get('full', '')}"


class FlagCounter(models.Model):
    """Single row holding the last flag number handed out to a field location."""

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID, editable=False)
    last_flag_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'flag_counter'

    def __str__(self):
        return f"Last flag #{self.last_flag_number}"
