"""Farmer CRUD, search and derived contract figures."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.core.store import get_or_not_found, translate_store_errors

from ..models import Farmer
from .exceptions import FarmerNotFoundError, InvalidFarmerError

logger = logging.getLogger(__name__)

FARMER_FIELDS = (
    'name',
    'phone_number',
    'payment_group',
    'personal_id',
    'address',
    'bank_info',
    'memo',
)

SEARCH_TYPES = ('name', 'phone_number', 'subdistrict', 'payment_group')


def _require(value, label):
    value = (value or '').strip()
    if not value:
        raise InvalidFarmerError(f"{label} is required")
    return value


def get_farmer_by_id(*, farmer_id: UUID) -> Farmer:
    """
    Get a farmer by ID.

    Raises:
        FarmerNotFoundError: If farmer doesn't exist
    """
    return get_or_not_found(
        Farmer.objects,
        FarmerNotFoundError,
        f"Farmer {farmer_id} not found",
        pk=farmer_id,
    )


def search_farmers(*, search_type: Optional[str] = None, value: Optional[str] = None) -> QuerySet:
    """
    Search farmers.

    ``name`` matches by prefix; the other search types match exactly. Without
    a search value every farmer is returned, ordered by name.

    Raises:
        InvalidFarmerError: If search_type is unknown
    """
    queryset = Farmer.objects.order_by('name')

    if not value:
        return queryset

    search_type = search_type or 'name'
    if search_type not in SEARCH_TYPES:
        raise InvalidFarmerError(f"Unknown search type: {search_type}")

    if search_type == 'name':
        return queryset.filter(name__startswith=value)
    return queryset.filter(**{search_type: value})


@translate_store_errors
@transaction.atomic
def create_farmer(
    *,
    name: str,
    phone_number: str,
    payment_group: str = '',
    personal_id: str = '',
    address: Optional[dict] = None,
    bank_info: Optional[dict] = None,
    memo: str = '',
    created_by: str = 'anonymous'
) -> Farmer:
    """
    Register a farmer.

    Raises:
        InvalidFarmerError: If name or phone number is blank
    """
    farmer = Farmer.objects.create(
        name=_require(name, "Farmer name"),
        phone_number=_require(phone_number, "Phone number"),
        payment_group=payment_group or '',
        personal_id=personal_id or '',
        address=address or {},
        bank_info=bank_info or {},
        memo=memo or '',
        created_by=created_by,
    )
    logger.info("Created farmer %s", farmer.id)
    return farmer


@translate_store_errors
@transaction.atomic
def update_farmer(*, farmer_id: UUID, **fields) -> Farmer:
    """
    Merge ``fields`` into a farmer. Unknown keys are ignored.

    Raises:
        FarmerNotFoundError: If farmer doesn't exist
        InvalidFarmerError: If name or phone number would become blank
    """
    farmer = get_or_not_found(
        Farmer.objects.select_for_update(),
        FarmerNotFoundError,
        f"Farmer {farmer_id} not found",
        pk=farmer_id,
    )

    update_fields = ['updated_at']
    for field in FARMER_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if field == 'name':
            value = _require(value, "Farmer name")
        elif field == 'phone_number':
            value = _require(value, "Phone number")
        setattr(farmer, field, value)
        update_fields.append(field)

    farmer.save(update_fields=update_fields)
    return farmer


@translate_store_errors
@transaction.atomic
def delete_farmer(*, farmer_id: UUID) -> None:
    """
    Delete a farmer together with their fields.

    Contracts and schedules keep existing with the farmer reference cleared.

    Raises:
        FarmerNotFoundError: If farmer doesn't exist
    """
    farmer = get_farmer_by_id(farmer_id=farmer_id)
    farmer.delete()
    logger.info("Deleted farmer %s", farmer_id)


def get_farmer_summary(farmer: Farmer) -> dict:
    """
    Derived figures shown with a farmer.

    Cancelled contracts are left out of the amounts. ``remaining_amount`` is
    the sum of each contract's outstanding balance and is not clamped.
    """
    from apps.contracts.models import ContractStatus
    from apps.contracts.services import compute_outstanding

    contracts = list(
        farmer.contracts
        .exclude(status=ContractStatus.CANCELLED)
        .prefetch_related('payment_lines')
    )

    return {
        'field_count': farmer.fields.count(),
        'active_contracts': sum(
            1 for c in contracts if c.status in (ContractStatus.PENDING, ContractStatus.ACTIVE)
        ),
        'total_contract_amount': sum((c.total_amount for c in contracts), Decimal('0')),
        'remaining_amount': sum((compute_outstanding(c) for c in contracts), Decimal('0')),
    }
