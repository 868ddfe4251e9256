"""
Building and removing settlement payments.

A payment links to its schedules through SettlementItem rows, and every
linked schedule points back at the payment with a ``payment_status``
mirroring the payment's own status.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors
from apps.schedules.models import Schedule, SchedulePaymentStatus
from apps.schedules.services.exceptions import ScheduleNotFoundError
from apps.workers.models import Worker
from apps.workers.services.exceptions import WorkerNotFoundError

from ..models import Payment, PaymentMethod, PaymentStatus, SettlementItem
from .exceptions import InvalidPaymentError, PaymentNotFoundError, ScheduleAlreadySettledError

logger = logging.getLogger(__name__)


SCHEDULE_STATUS_FOR_PAYMENT = {
    PaymentStatus.COMPLETED: SchedulePaymentStatus.COMPLETED,
    PaymentStatus.PROCESSING: SchedulePaymentStatus.ONHOLD,
    PaymentStatus.PENDING: SchedulePaymentStatus.REQUESTED,
}


def schedule_status_for(payment_status: str) -> str:
    """Schedule ``payment_status`` matching a payment status."""
    return SCHEDULE_STATUS_FOR_PAYMENT.get(payment_status, SchedulePaymentStatus.REQUESTED)


def _clean_amount(value) -> Decimal:
    amount = to_cents(value, InvalidPaymentError, 'amount')
    if amount <= 0:
        raise InvalidPaymentError("Amount must be positive")
    return amount


def _check_choices(*, method=None, status=None):
    if method is not None and method not in PaymentMethod.values:
        raise InvalidPaymentError(f"Invalid payment method: {method}")
    if status is not None and status not in PaymentStatus.values:
        raise InvalidPaymentError(f"Invalid payment status: {status}")


def _describe(schedule: Schedule) -> str:
    parts = [schedule.get_work_type_display()]
    if schedule.farmer_id:
        parts.insert(0, schedule.farmer.name)
    if schedule.quantity is not None:
        parts.append(f"{schedule.quantity.normalize():f}{schedule.unit}")
    return ' '.join(parts)


def _unique_ids(schedule_ids) -> List[str]:
    unique_ids = list(dict.fromkeys(str(schedule_id) for schedule_id in schedule_ids or []))
    if not unique_ids:
        raise InvalidPaymentError("At least one schedule is required")
    return unique_ids


def _lock_unsettled(schedule_ids) -> List[Schedule]:
    """Lock the schedules, which must exist and not belong to any payment."""
    schedules = []
    for schedule_id in schedule_ids:
        schedule = get_or_not_found(
            Schedule.objects.select_for_update().select_related('farmer'),
            ScheduleNotFoundError,
            f"Schedule {schedule_id} not found",
            pk=schedule_id,
        )
        if schedule.payment_id:
            raise ScheduleAlreadySettledError(
                f"Schedule {schedule_id} is already settled by payment {schedule.payment_id}"
            )
        schedules.append(schedule)
    return schedules


def _link(payment: Payment, schedules: List[Schedule]) -> None:
    SettlementItem.objects.bulk_create([
        SettlementItem(
            payment=payment,
            schedule=schedule,
            schedule_type=schedule.work_type,
            schedule_date=timezone.localdate(schedule.scheduled_start) if schedule.scheduled_start else None,
            description=_describe(schedule),
        )
        for schedule in schedules
    ])
    Schedule.objects.filter(pk__in=[s.pk for s in schedules]).update(
        payment=payment,
        payment_status=schedule_status_for(payment.status),
        updated_at=timezone.now(),
    )


def get_payment_by_id(*, payment_id: UUID) -> Payment:
    """
    Get a payment with its settlement items.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
    """
    return get_or_not_found(
        Payment.objects.select_related('receiver').prefetch_related('items'),
        PaymentNotFoundError,
        f"Payment {payment_id} not found",
        pk=payment_id,
    )


def list_payments(
    *,
    receiver_id: Optional[UUID] = None,
    status: Optional[str] = None,
    date_from=None,
    date_to=None
) -> QuerySet:
    """Payments filtered by receiver, status and payment date range."""
    queryset = Payment.objects.select_related('receiver').prefetch_related('items')
    if receiver_id:
        queryset = queryset.filter(receiver_id=receiver_id)
    if status:
        queryset = queryset.filter(status=status)
    if date_from:
        queryset = queryset.filter(payment_date__gte=date_from)
    if date_to:
        queryset = queryset.filter(payment_date__lte=date_to)
    return queryset


@translate_store_errors
@transaction.atomic
def create_payment(
    *,
    receiver_id: UUID,
    schedule_ids: List[UUID],
    amount,
    payment_date=None,
    method: str = PaymentMethod.BANK,
    status: str = PaymentStatus.PENDING,
    bank_info: Optional[dict] = None,
    receipt_ref: str = '',
    memo: str = '',
    payer_id: str = 'anonymous'
) -> Payment:
    """
    Create a settlement payment over the given schedules.

    Each schedule gets one SettlementItem, its ``payment`` set to the new
    payment and its ``payment_status`` set from the payment status.

    Args:
        receiver_id: Worker being paid
        schedule_ids: Schedules settled by this payment; duplicates are ignored
        amount: Amount paid, must be positive
        payment_date: Defaults to today
        method: bank, cash or other
        status: pending, processing or completed
        bank_info: Defaults to the receiver's bank info
        receipt_ref: Optional receipt reference
        memo: Free text
        payer_id: Id of the user recording the payment

    Returns:
        Created Payment

    Raises:
        InvalidPaymentError: If no schedules are given, amount <= 0, or method
            or status is unknown
        WorkerNotFoundError: If receiver doesn't exist
        ScheduleNotFoundError: If any schedule doesn't exist
        ScheduleAlreadySettledError: If a schedule belongs to another payment
    """
    unique_ids = _unique_ids(schedule_ids)
    amount = _clean_amount(amount)
    _check_choices(method=method, status=status)

    receiver = get_or_not_found(
        Worker.objects,
        WorkerNotFoundError,
        f"Worker {receiver_id} not found",
        pk=receiver_id,
    )
    schedules = _lock_unsettled(unique_ids)

    payment = Payment.objects.create(
        receiver=receiver,
        receiver_name=receiver.name,
        receiver_type=receiver.type,
        payer_id=payer_id,
        amount=amount,
        method=method,
        status=status,
        bank_info=bank_info if bank_info is not None else dict(receiver.bank_info or {}),
        payment_date=payment_date or timezone.localdate(),
        receipt_ref=receipt_ref or '',
        memo=memo or '',
    )
    _link(payment, schedules)

    logger.info(
        "Created payment %s of %s to %s covering %d schedules",
        payment.id, amount, receiver.name, len(schedules)
    )
    return payment


@translate_store_errors
@transaction.atomic
def update_payment(
    *,
    payment_id: UUID,
    schedule_ids: Optional[List[UUID]] = None,
    amount=None,
    payment_date=None,
    method: Optional[str] = None,
    status: Optional[str] = None,
    bank_info: Optional[dict] = None,
    receipt_ref: Optional[str] = None,
    memo: Optional[str] = None
) -> Payment:
    """
    Edit a payment in place. Arguments left as None are unchanged.

    When ``schedule_ids`` is given it replaces the settled set: schedules no
    longer listed are released back to pending, newly listed ones are linked
    with the status mapped from the payment's (possibly new) status.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        InvalidPaymentError: If the schedule list is empty, amount <= 0, or
            method or status is unknown
        ScheduleNotFoundError: If an added schedule doesn't exist
        ScheduleAlreadySettledError: If an added schedule belongs to another payment
    """
    _check_choices(method=method, status=status)
    if amount is not None:
        amount = _clean_amount(amount)
    wanted = _unique_ids(schedule_ids) if schedule_ids is not None else None

    payment = get_or_not_found(
        Payment.objects.select_for_update(),
        PaymentNotFoundError,
        f"Payment {payment_id} not found",
        pk=payment_id,
    )

    changes = {
        'amount': amount,
        'payment_date': payment_date,
        'method': method,
        'status': status,
        'bank_info': bank_info,
        'receipt_ref': receipt_ref,
        'memo': memo,
    }
    update_fields = ['updated_at']
    for name, value in changes.items():
        if value is not None:
            setattr(payment, name, value)
            update_fields.append(name)
    payment.save(update_fields=update_fields)

    added = removed = 0
    if wanted is not None:
        current = {str(pk) for pk in payment.items.values_list('schedule_id', flat=True)}
        released = [pk for pk in current if pk not in wanted]
        if released:
            SettlementItem.objects.filter(payment=payment, schedule_id__in=released).delete()
            removed = Schedule.objects.filter(pk__in=released).update(
                payment=None,
                payment_status=SchedulePaymentStatus.PENDING,
                updated_at=timezone.now(),
            )
        new_schedules = _lock_unsettled([pk for pk in wanted if pk not in current])
        _link(payment, new_schedules)
        added = len(new_schedules)

    if status is not None:
        Schedule.objects.filter(payment=payment).update(
            payment_status=schedule_status_for(status),
            updated_at=timezone.now(),
        )

    logger.info(
        "Updated payment %s (%s), %d schedules added, %d released",
        payment.id, ', '.join(update_fields[1:]) or 'no fields', added, removed
    )
    return payment



@translate_store_errors
@transaction.atomic
def update_payment_status(*, payment_id: UUID, status: str) -> Payment:
    """
    Change a payment's status and mirror it on its schedules.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        InvalidPaymentError: If status is unknown
    """
    if status not in PaymentStatus.values:
        raise InvalidPaymentError(f"Invalid payment status: {status}")

    payment = get_or_not_found(
        Payment.objects.select_for_update(),
        PaymentNotFoundError,
        f"Payment {payment_id} not found",
        pk=payment_id,
    )
    payment.status = status
    payment.save(update_fields=['status', 'updated_at'])

    Schedule.objects.filter(payment=payment).update(
        payment_status=schedule_status_for(status),
        updated_at=timezone.now(),
    )

    logger.info("Payment %s status set to %s", payment.id, status)
    return payment


@translate_store_errors
@transaction.atomic
def delete_payment(*, payment_id: UUID) -> None:
    """
    Delete a payment.

    Previously linked schedules lose their ``payment`` reference and go back
    to ``payment_status`` pending, so they can be settled again.

    Raises:
        PaymentNotFoundError: If payment doesn't exist
    """
    payment = get_or_not_found(
        Payment.objects.select_for_update(),
        PaymentNotFoundError,
        f"Payment {payment_id} not found",
        pk=payment_id,
    )

    released = Schedule.objects.filter(payment=payment).update(
        payment=None,
        payment_status=SchedulePaymentStatus.PENDING,
        updated_at=timezone.now(),
    )
    payment.delete()

    logger.info("Deleted payment %s, released %d schedules", payment_id, released)
