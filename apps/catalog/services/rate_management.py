"""Rate sub-manager: priced line items owned by a category."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max

from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors

from ..models import Category, Rate
from .exceptions import CategoryNotFoundError, InvalidRateError, RateNotFoundError

logger = logging.getLogger(__name__)

RATE_FIELDS = ('name', 'description', 'default_price', 'unit')


def _clean_price(value) -> Decimal:
    price = to_cents(value, InvalidRateError, 'default price')
    if price < 0:
        raise InvalidRateError("Default price must not be negative")
    return price


def _lock_category(category_id) -> Category:
    return get_or_not_found(
        Category.objects.select_for_update(),
        CategoryNotFoundError,
        f"Category {category_id} not found",
        pk=category_id,
    )


@translate_store_errors
@transaction.atomic
def add_rate(
    *,
    category_id: UUID,
    name: str,
    default_price,
    unit: str,
    description: str = ''
) -> Rate:
    """
    Append a rate to a category.

    Args:
        category_id: Owning category
        name: Rate name (must not be blank)
        default_price: Non-negative price per unit
        unit: Free-text unit label
        description: Optional description

    Returns:
        Created Rate with a freshly generated id

    Raises:
        InvalidRateError: If name is blank or price is negative
        CategoryNotFoundError: If category doesn't exist
    """
    name = (name or '').strip()
    if not name:
        raise InvalidRateError("Rate name is required")
    price = _clean_price(default_price)

    category = _lock_category(category_id)

    last_position = category.rates.aggregate(last=Max('position'))['last']
    rate = Rate.objects.create(
        category=category,
        name=name,
        description=description,
        default_price=price,
        unit=unit or '',
        position=0 if last_position is None else last_position + 1,
    )
    logger.info("Added rate %s to category %s", rate.id, category.id)
    return rate


@translate_store_errors
@transaction.atomic
def update_rate(*, category_id: UUID, rate_id: UUID, **fields) -> Rate:
    """
    Merge ``fields`` into an existing rate.

    Only name, description, default_price and unit are accepted; any other
    key is ignored.

    Raises:
        CategoryNotFoundError: If category doesn't exist
        RateNotFoundError: If the rate isn't in that category
        InvalidRateError: If the merged values are invalid
    """
    category = _lock_category(category_id)
    rate = get_or_not_found(
        category.rates.all(),
        RateNotFoundError,
        f"Rate {rate_id} not found in category {category_id}",
        pk=rate_id,
    )

    update_fields = []
    for field in RATE_FIELDS:
        if field not in fields or fields[field] is None:
            continue
        value = fields[field]
        if field == 'name':
            value = value.strip()
            if not value:
                raise InvalidRateError("Rate name is required")
        elif field == 'default_price':
            value = _clean_price(value)
        setattr(rate, field, value)
        update_fields.append(field)

    if update_fields:
        rate.save(update_fields=update_fields)
    return rate


@translate_store_errors
@transaction.atomic
def remove_rate(*, category_id: UUID, rate_id: UUID) -> Optional[Rate]:
    """
    Remove a rate from a category.

    Removing a rate that isn't there is a no-op.

    Raises:
        CategoryNotFoundError: If category doesn't exist
    """
    category = _lock_category(category_id)
    rate = category.rates.filter(pk=rate_id).first()
    if rate is None:
        return None

    rate.delete()
    logger.info("Removed rate %s from category %s", rate_id, category.id)
    return rate
