"""Field CRUD and the field stage history."""

import logging
import uuid
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors

from ..models import Farmer, Field, FlagCounter
from .exceptions import FarmerNotFoundError, FieldNotFoundError, InvalidFieldError

logger = logging.getLogger(__name__)

FIELD_FIELDS = (
    'address',
    'area_value',
    'area_unit',
    'crop_type',
    'estimated_harvest_date',
    'locations',
    'memo',
)


def _clean_area(value) -> Decimal:
    area = to_cents(value, InvalidFieldError, 'area')
    if area < 0:
        raise InvalidFieldError("Area must not be negative")
    return area


def _default_location(address, area_value, area_unit, crop_type) -> dict:
    return {
        'id': f"location-{uuid.uuid4().hex[:12]}",
        'address': address,
        'area': {'value': float(area_value), 'unit': area_unit},
        'crop_type': crop_type,
    }


def _flag_value(raw) -> int:
    if raw in (None, ''):
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidFieldError(f"Invalid flag number: {raw}")


def _number_locations(locations) -> list:
    """
    Give every location without a flag number the next one from the counter.

    Explicit flag numbers are kept, and the counter is raised to the highest
    number in use so later locations never reuse it. Must run inside a
    transaction; the counter row stays locked until it commits.
    """
    counter, _ = FlagCounter.objects.select_for_update().get_or_create(pk=FlagCounter.SINGLETON_ID)
    last = counter.last_flag_number

    numbered = []
    for location in locations:
        location = dict(location)
        flag = _flag_value(location.get('flag_number'))
        if flag <= 0:
            last += 1
            flag = last
        else:
            last = max(last, flag)
        location['flag_number'] = flag
        numbered.append(location)

    if last != counter.last_flag_number:
        counter.last_flag_number = last
        counter.save(update_fields=['last_flag_number', 'updated_at'])
    return numbered


def get_field_by_id(*, field_id: UUID) -> Field:
    """
    Get a field by ID.

    Raises:
        FieldNotFoundError: If field doesn't exist
    """
    return get_or_not_found(
        Field.objects.select_related('farmer'),
        FieldNotFoundError,
        f"Field {field_id} not found",
        pk=field_id,
    )


def list_fields(*, farmer_id: Optional[UUID] = None, crop_type: Optional[str] = None) -> QuerySet:
    queryset = Field.objects.select_related('farmer')
    if farmer_id:
        queryset = queryset.filter(farmer_id=farmer_id)
    if crop_type:
        queryset = queryset.filter(crop_type=crop_type)
    return queryset


@translate_store_errors
@transaction.atomic
def create_field(
    *,
    farmer_id: UUID,
    address: Optional[dict] = None,
    area_value=0,
    area_unit: str = '평',
    crop_type: str = '',
    estimated_harvest_date=None,
    locations: Optional[list] = None,
    memo: str = ''
) -> Field:
    """
    Create a field for a farmer.

    When no locations are given but an address is, a single location is built
    from the address, area and crop type. Locations without a flag number get
    the next one from the shared flag counter.

    Raises:
        FarmerNotFoundError: If farmer doesn't exist
        InvalidFieldError: If area is negative
    """
    area_value = _clean_area(area_value)
    farmer = get_or_not_found(
        Farmer.objects,
        FarmerNotFoundError,
        f"Farmer {farmer_id} not found",
        pk=farmer_id,
    )

    address = address or {}
    if not locations and address:
        locations = [_default_location(address, area_value, area_unit, crop_type)]
    if locations:
        locations = _number_locations(locations)

    field = Field.objects.create(
        farmer=farmer,
        address=address,
        area_value=area_value,
        area_unit=area_unit,
        crop_type=crop_type or '',
        estimated_harvest_date=estimated_harvest_date,
        stage_updated_at=timezone.now(),
        locations=locations or [],
        memo=memo or '',
    )
    logger.info("Created field %s for farmer %s", field.id, farmer.id)
    return field


@translate_store_errors
@transaction.atomic
def update_field(*, field_id: UUID, **fields) -> Field:
    """
    Merge ``fields`` into a field. Stage changes go through ``update_field_stage``.

    Raises:
        FieldNotFoundError: If field doesn't exist
        InvalidFieldError: If area is negative
    """
    field = get_or_not_found(
        Field.objects.select_for_update(),
        FieldNotFoundError,
        f"Field {field_id} not found",
        pk=field_id,
    )

    update_fields = ['updated_at']
    for name in FIELD_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == 'area_value':
            value = _clean_area(value)
        elif name == 'locations':
            value = _number_locations(value or [])
        setattr(field, name, value)
        update_fields.append(name)

    field.save(update_fields=update_fields)
    return field


@translate_store_errors
@transaction.atomic
def delete_field(*, field_id: UUID) -> None:
    """
    Delete a field.

    Raises:
        FieldNotFoundError: If field doesn't exist
    """
    field = get_or_not_found(
        Field.objects,
        FieldNotFoundError,
        f"Field {field_id} not found",
        pk=field_id,
    )
    field.delete()
    logger.info("Deleted field %s", field_id)


@translate_store_errors
@transaction.atomic
def update_field_stage(*, field_id: UUID, stage: str, actor_id: str) -> Field:
    """
    Set the field's current stage and append it to the stage history.

    Args:
        field_id: Field to update
        stage: New stage label
        actor_id: Id stamped as ``by`` on the history entry

    Raises:
        FieldNotFoundError: If field doesn't exist
        InvalidFieldError: If stage is blank
    """
    stage = (stage or '').strip()
    if not stage:
        raise InvalidFieldError("Stage is required")

    field = get_or_not_found(
        Field.objects.select_for_update(),
        FieldNotFoundError,
        f"Field {field_id} not found",
        pk=field_id,
    )

    now = timezone.now()
    field.stage_history = list(field.stage_history or []) + [{
        'stage': stage,
        'timestamp': now.isoformat(),
        'by': actor_id,
    }]
    field.current_stage = stage
    field.stage_updated_at = now
    field.save(update_fields=['current_stage', 'stage_updated_at', 'stage_history', 'updated_at'])

    logger.info("Field %s stage -> %s by %s", field.id, stage, actor_id)
    return field
