"""Schedule CRUD and filtering."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors
from apps.farmers.models import Farmer, Field
from apps.farmers.services.exceptions import FarmerNotFoundError, FieldNotFoundError
from apps.workers.models import Worker
from apps.workers.services.exceptions import WorkerNotFoundError

from ..models import Schedule, ScheduleWorkType, StageTransition
from .exceptions import InvalidScheduleError, ScheduleNotFoundError
from .stage_machine import INITIAL_STAGE, detach_from_payment

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = (
    'scheduled_start',
    'scheduled_end',
    'actual_start',
    'actual_end',
    'base_rate',
    'negotiated_rate',
    'quantity',
    'unit',
    'additional_amount',
    'transport_info',
    'additional_info',
    'memo',
)

DECIMAL_FIELDS = ('base_rate', 'negotiated_rate', 'quantity', 'additional_amount')


def _clean_decimal(value, label, allow_none=True) -> Optional[Decimal]:
    if value is None:
        if allow_none:
            return None
        raise InvalidScheduleError(f"{label} is required")
    number = to_cents(value, InvalidScheduleError, label)
    if number < 0:
        raise InvalidScheduleError(f"{label} must not be negative")
    return number


def _resolve(model, error_class, label, pk):
    if not pk:
        return None
    return get_or_not_found(model.objects, error_class, f"{label} {pk} not found", pk=pk)


def get_schedule_by_id(*, schedule_id: UUID) -> Schedule:
    """
    Get a schedule with its history and additional settlements.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
    """
    return get_or_not_found(
        Schedule.objects
        .select_related('farmer', 'field', 'worker', 'payment')
        .prefetch_related('stage_history', 'additional_settlements'),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )


def list_schedules(
    *,
    farmer_id: Optional[UUID] = None,
    field_id: Optional[UUID] = None,
    worker_id: Optional[UUID] = None,
    work_type: Optional[str] = None,
    stage: Optional[str] = None,
    payment_status: Optional[str] = None
) -> QuerySet:
    """Schedules matching every given filter, latest scheduled first."""
    queryset = (
        Schedule.objects
        .select_related('farmer', 'field', 'worker')
        .prefetch_related('stage_history', 'additional_settlements')
    )
    filters = {
        'farmer_id': farmer_id,
        'field_id': field_id,
        'worker_id': worker_id,
        'work_type': work_type,
        'stage_current': stage,
        'payment_status': payment_status,
    }
    return queryset.filter(**{key: value for key, value in filters.items() if value})


@translate_store_errors
@transaction.atomic
def create_schedule(
    *,
    work_type: str,
    scheduled_start,
    actor_id: str,
    farmer_id: Optional[UUID] = None,
    field_id: Optional[UUID] = None,
    worker_id: Optional[UUID] = None,
    scheduled_end=None,
    base_rate=0,
    negotiated_rate=None,
    quantity=None,
    unit: str = '',
    additional_amount=None,
    transport_info: Optional[dict] = None,
    additional_info: Optional[dict] = None,
    memo: str = ''
) -> Schedule:
    """
    Create a schedule in stage 예정 with its first history entry.

    Args:
        work_type: One of ScheduleWorkType
        scheduled_start: Planned start
        actor_id: Id stamped on the initial history entry
        farmer_id, field_id, worker_id: Optional references; must exist when given
        base_rate, negotiated_rate, quantity, unit, additional_amount: Rate info
        transport_info: Transport sub-document for transport schedules
        additional_info: Work-type specific fields
        memo: Free text

    Returns:
        Created Schedule

    Raises:
        InvalidScheduleError: If work type, start or an amount is invalid
        FarmerNotFoundError, FieldNotFoundError, WorkerNotFoundError: If a
            given reference doesn't exist
    """
    if work_type not in ScheduleWorkType.values:
        raise InvalidScheduleError(f"Invalid work type: {work_type}")
    if scheduled_start is None:
        raise InvalidScheduleError("Scheduled start is required")
    if scheduled_end is not None and scheduled_end < scheduled_start:
        raise InvalidScheduleError("Scheduled end must not be before start")

    rates = {
        'base_rate': _clean_decimal(base_rate, 'base rate', allow_none=False),
        'negotiated_rate': _clean_decimal(negotiated_rate, 'negotiated rate'),
        'quantity': _clean_decimal(quantity, 'quantity'),
        'additional_amount': _clean_decimal(additional_amount, 'additional amount'),
    }

    farmer = _resolve(Farmer, FarmerNotFoundError, 'Farmer', farmer_id)
    field = _resolve(Field, FieldNotFoundError, 'Field', field_id)
    worker = _resolve(Worker, WorkerNotFoundError, 'Worker', worker_id)
    if farmer is None and field is not None:
        farmer = field.farmer

    schedule = Schedule.objects.create(
        work_type=work_type,
        farmer=farmer,
        field=field,
        worker=worker,
        stage_current=INITIAL_STAGE,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        unit=unit or '',
        transport_info=transport_info or {},
        additional_info=additional_info or {},
        memo=memo or '',
        **rates
    )
    StageTransition.objects.create(schedule=schedule, stage=INITIAL_STAGE, by=actor_id)

    logger.info("Created %s schedule %s", work_type, schedule.id)
    return schedule


@translate_store_errors
@transaction.atomic
def update_schedule(
    *,
    schedule_id: UUID,
    farmer_id: Optional[UUID] = None,
    field_id: Optional[UUID] = None,
    worker_id: Optional[UUID] = None,
    **fields
) -> Schedule:
    """
    Merge ``fields`` into a schedule.

    Stage, history, payment link and completion details are not editable
    here; they have their own operations.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        InvalidScheduleError: If an amount is invalid
        FarmerNotFoundError, FieldNotFoundError, WorkerNotFoundError: If a
            given reference doesn't exist
    """
    schedule = get_or_not_found(
        Schedule.objects.select_for_update(),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )

    update_fields = ['updated_at']
    for name in SCHEDULE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name in DECIMAL_FIELDS:
            value = _clean_decimal(value, name.replace('_', ' '), allow_none=name != 'base_rate')
        setattr(schedule, name, value)
        update_fields.append(name)

    if farmer_id:
        schedule.farmer = _resolve(Farmer, FarmerNotFoundError, 'Farmer', farmer_id)
        update_fields.append('farmer')
    if field_id:
        schedule.field = _resolve(Field, FieldNotFoundError, 'Field', field_id)
        update_fields.append('field')
    if worker_id:
        schedule.worker = _resolve(Worker, WorkerNotFoundError, 'Worker', worker_id)
        update_fields.append('worker')

    if schedule.scheduled_end and schedule.scheduled_end < schedule.scheduled_start:
        raise InvalidScheduleError("Scheduled end must not be before start")

    schedule.save(update_fields=update_fields)
    return schedule


@translate_store_errors
@transaction.atomic
def delete_schedule(*, schedule_id: UUID) -> None:
    """
    Delete a schedule, removing it from any settlement first.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
    """
    schedule = get_or_not_found(
        Schedule.objects.select_for_update(),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )
    detach_from_payment(schedule)
    schedule.delete()
    logger.info("Deleted schedule %s", schedule_id)
