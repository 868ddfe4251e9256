from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class PaymentMethod(models.TextChoices):
    BANK = 'bank', 'Bank transfer'
    CASH = 'cash', 'Cash'
    OTHER = 'other', 'Other'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    COMPLETED = 'completed', 'Completed'


class Payment(models.Model):
    """
    One payout to a foreman or driver covering one or more schedules.

    Receiver name and type are cached so the record still reads correctly
    after the worker is edited or removed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    receiver = models.ForeignKey(
        'workers.Worker',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )
    receiver_name = models.CharField(max_length=100)
    receiver_type = models.CharField(max_length=10)
    payer_id = models.CharField(max_length=64, default='anonymous')

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    method = models.CharField(max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.BANK)
    status = models.CharField(
        max_length=12,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True
    )
    bank_info = models.JSONField(default=dict, blank=True)
    payment_date = models.DateField(db_index=True)
    receipt_ref = models.CharField(max_length=255, blank=True)

    memo = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_date', '-created_at']

    def __str__(self):
        return f"{self.receiver_name} {self.amount} ({self.payment_date})"


class SettlementItem(models.Model):
    """A schedule settled by a payment, with its display details."""

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name='items'
    )
    schedule = models.OneToOneField(
        'schedules.Schedule',
        on_delete=models.CASCADE,
        related_name='settlement_item'
    )
    schedule_type = models.CharField(max_length=20)
    schedule_date = models.DateField(null=True, blank=True)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'payment_settlement_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.schedule_type} {self.schedule_date}"
