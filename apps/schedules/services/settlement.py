"""Completion details, additional settlements and the settlement total of a schedule."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Category
from apps.catalog.services.exceptions import CategoryNotFoundError
from apps.core.numbers import CENTS, to_cents
from apps.core.store import get_or_not_found, translate_store_errors

from ..models import AdditionalSettlement, Schedule
from .exceptions import InvalidScheduleError, ScheduleNotFoundError

logger = logging.getLogger(__name__)


def _decimal(value, label) -> Decimal:
    return to_cents(value, InvalidScheduleError, label)


def _json_value(value):
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value


def settlement_total(schedule: Schedule) -> Decimal:
    """
    Amount owed for a schedule.

    (negotiated rate, or base rate when there is none) x quantity
    + every additional settlement + the ad-hoc additional amount.
    A missing quantity counts as zero.
    """
    rate = schedule.negotiated_rate if schedule.negotiated_rate is not None else schedule.base_rate
    quantity = schedule.quantity if schedule.quantity is not None else Decimal('0')
    additional = sum(
        (item.amount for item in schedule.additional_settlements.all()),
        Decimal('0'),
    )
    total = rate * quantity + additional + (schedule.additional_amount or Decimal('0'))
    return total.quantize(CENTS)


@translate_store_errors
@transaction.atomic
def record_completion_details(
    *,
    schedule_id: UUID,
    quantity,
    unit: str,
    work_price=None,
    notes: str = '',
    **type_specific
) -> Schedule:
    """
    Attach measured quantities to a schedule. The stage is left unchanged.

    ``work_price`` becomes the negotiated rate. Type-specific values
    (``harvest_amount`` for cutting, ``transport_fee`` for transport, ...) are
    kept in ``completion_details`` alongside the rest.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        InvalidScheduleError: If quantity or price is invalid
    """
    quantity = _decimal(quantity, 'quantity')
    if quantity < 0:
        raise InvalidScheduleError("Quantity must not be negative")
    if work_price is not None:
        work_price = _decimal(work_price, 'work price')
        if work_price < 0:
            raise InvalidScheduleError("Work price must not be negative")

    schedule = get_or_not_found(
        Schedule.objects.select_for_update(),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )

    details = {
        'quantity': str(quantity),
        'unit': unit,
        'work_price': None if work_price is None else str(work_price),
        'notes': notes or '',
        'recorded_at': timezone.now().isoformat(),
    }
    details.update({key: _json_value(value) for key, value in type_specific.items()})

    schedule.quantity = quantity
    schedule.unit = unit or schedule.unit
    schedule.completion_details = details
    update_fields = ['quantity', 'unit', 'completion_details', 'updated_at']
    if work_price is not None:
        schedule.negotiated_rate = work_price
        update_fields.append('negotiated_rate')

    schedule.save(update_fields=update_fields)
    logger.info("Recorded completion details for schedule %s", schedule.id)
    return schedule


@translate_store_errors
@transaction.atomic
def add_additional_settlement(
    *,
    schedule_id: UUID,
    amount,
    reason: str = '',
    date=None,
    category_id: Optional[UUID] = None
) -> AdditionalSettlement:
    """
    Append an additional settlement to a schedule, whatever its stage.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        CategoryNotFoundError: If category_id is given and doesn't exist
        InvalidScheduleError: If amount is invalid
    """
    amount = _decimal(amount, 'amount')

    schedule = get_or_not_found(
        Schedule.objects.select_for_update(),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )
    category = None
    if category_id:
        category = get_or_not_found(
            Category.objects,
            CategoryNotFoundError,
            f"Category {category_id} not found",
            pk=category_id,
        )

    settlement = AdditionalSettlement.objects.create(
        schedule=schedule,
        amount=amount,
        reason=reason or '',
        date=date or timezone.localdate(),
        category=category,
    )
    schedule.save(update_fields=['updated_at'])

    logger.info("Added settlement of %s to schedule %s", amount, schedule.id)
    return settlement
