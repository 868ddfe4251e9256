from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from apps.farmers.models import Farmer, Field


class ContractStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentLineKind(models.TextChoices):
    DOWN = 'down', 'Down payment'
    INTERMEDIATE = 'intermediate', 'Intermediate payment'
    FINAL = 'final', 'Final payment'


class PaymentLineStatus(models.TextChoices):
    UNPAID = 'unpaid', 'Unpaid'
    SCHEDULED = 'scheduled', 'Scheduled'
    PAID = 'paid', 'Paid'


class Contract(models.Model):
    """
    Agreement with a farmer over one or more fields.

    ``status`` is set explicitly and is never derived from the payment lines.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    farmer = models.ForeignKey(
        Farmer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contracts'
    )
    fields = models.ManyToManyField(Field, related_name='contracts', blank=True)

    contract_number = models.CharField(max_length=50, unique=True)
    contract_date = models.DateField()
    contract_type = models.CharField(max_length=50, default='일반')
    status = models.CharField(
        max_length=10,
        choices=ContractStatus.choices,
        default=ContractStatus.PENDING,
        db_index=True
    )
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )

    # harvest_period {start, end}, price_per_unit, unit_type,
    # estimated_quantity, special_terms, quality_standards
    details = models.JSONField(default=dict, blank=True)

    memo = models.TextField(blank=True)
    created_by = models.CharField(max_length=64, default='anonymous')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'contracts'
        ordering = ['-contract_date', '-created_at']
        indexes = [
            models.Index(fields=['farmer', 'status']),
        ]

    def __str__(self):
        return self.contract_number


class PaymentLine(models.Model):
    """One installment of a contract: the down payment, an intermediate or the final payment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.ForeignKey(
        Contract,
        on_delete=models.CASCADE,
        related_name='payment_lines'
    )
    kind = models.CharField(max_length=12, choices=PaymentLineKind.choices)
    # Only set for intermediate payments
    installment_number = models.PositiveIntegerField(null=True, blank=True)

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=10,
        choices=PaymentLineStatus.choices,
        default=PaymentLineStatus.UNPAID
    )

    paid_date = models.DateField(null=True, blank=True)
    # May differ from amount for partial or adjusted payments
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    receipt_ref = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'contract_payment_lines'
        constraints = [
            models.UniqueConstraint(
                fields=['contract', 'kind'],
                condition=models.Q(kind__in=['down', 'final']),
                name='unique_down_and_final_per_contract'
            ),
            models.UniqueConstraint(
                fields=['contract', 'installment_number'],
                condition=models.Q(kind='intermediate'),
                name='unique_installment_number_per_contract'
            ),
        ]

    def __str__(self):
        if self.kind == PaymentLineKind.INTERMEDIATE:
            return f"{self.contract_id} intermediate #{self.installment_number}"
        return f"{self.contract_id} {self.kind}"
