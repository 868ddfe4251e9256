from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class ScheduleWorkType(models.TextChoices):
    PULLING = 'pulling', '뽑기'
    CUTTING = 'cutting', '자르기'
    PACKING = 'packing', '망담기'
    TRANSPORT = 'transport', '운송'
    NETTING = 'netting', '망작업'


class WorkStage(models.TextChoices):
    SCHEDULED = '예정', 'Scheduled'
    PREPARING = '준비중', 'Preparing'
    IN_PROGRESS = '진행중', 'In progress'
    COMPLETED = '완료', 'Completed'
    CANCELLED = '취소', 'Cancelled'


class SchedulePaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    REQUESTED = 'requested', 'Requested'
    ONHOLD = 'onhold', 'On hold'
    COMPLETED = 'completed', 'Completed'


class Schedule(models.Model):
    """
    One work assignment for a field.

    ``stage_current`` always equals the stage of the latest ``stage_history``
    row; both are only changed through the stage machine.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    work_type = models.CharField(max_length=20, choices=ScheduleWorkType.choices, db_index=True)

    farmer = models.ForeignKey(
        'farmers.Farmer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='schedules'
    )
    field = models.ForeignKey(
        'farmers.Field',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='schedules'
    )
    worker = models.ForeignKey(
        'workers.Worker',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='schedules'
    )

    stage_current = models.CharField(
        max_length=10,
        choices=WorkStage.choices,
        default=WorkStage.SCHEDULED,
        db_index=True
    )

    scheduled_start = models.DateTimeField()
    scheduled_end = models.DateTimeField(null=True, blank=True)
    actual_start = models.DateTimeField(null=True, blank=True)
    actual_end = models.DateTimeField(null=True, blank=True)

    # Rate info
    base_rate = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    negotiated_rate = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    quantity = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    unit = models.CharField(max_length=20, blank=True)
    additional_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    # origin, destination, cargo, distance, distance_rate, additional_fee
    transport_info = models.JSONField(default=dict, blank=True)
    # crop_type, expected_quantity, cutting_method, packaging_type, flag_number, ...
    additional_info = models.JSONField(default=dict, blank=True)
    completion_details = models.JSONField(default=dict, blank=True)

    payment_status = models.CharField(
        max_length=10,
        choices=SchedulePaymentStatus.choices,
        default=SchedulePaymentStatus.PENDING,
        db_index=True
    )
    payment = models.ForeignKey(
        'payments.Payment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='schedules'
    )

    memo = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'schedules'
        ordering = ['-scheduled_start']
        indexes = [
            models.Index(fields=['worker', 'stage_current']),
            models.Index(fields=['farmer', 'scheduled_start']),
        ]

    def __str__(self):
        return f"{self.get_work_type_display()} {self.scheduled_start:%Y-%m-%d} ({self.stage_current})"


class StageTransition(models.Model):
    """Append-only stage history entry."""

    schedule = models.ForeignKey(
        Schedule,
        on_delete=models.CASCADE,
        related_name='stage_history'
    )
    stage = models.CharField(max_length=10, choices=WorkStage.choices)
    timestamp = models.DateTimeField(default=timezone.now)
    by = models.CharField(max_length=64)

    class Meta:
        db_table = 'schedule_stage_history'
        ordering = ['id']

    def __str__(self):
        return f"{self.stage} @ {self.timestamp:%Y-%m-%d %H:%M} by {self.by}"


class AdditionalSettlement(models.Model):
    """Extra amount settled on a schedule, e.g. for unplanned work."""

    schedule = models.ForeignKey(
        Schedule,
        on_delete=models.CASCADE,
        related_name='additional_settlements'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    reason = models.CharField(max_length=255, blank=True)
    date = models.DateField(default=timezone.localdate)
    category = models.ForeignKey(
        'catalog.Category',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='additional_settlements'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'schedule_additional_settlements'
        ordering = ['id']

    def __str__(self):
        return f"{self.amount} ({self.reason})"
