"""CRUD for flat lookup values: payment groups, crop types, work types."""

import logging
from uuid import UUID

from django.db import transaction

from apps.core.store import get_or_not_found, translate_store_errors

from .exceptions import (
    DuplicateLookupValueError,
    InvalidLookupValueError,
    LookupValueNotFoundError,
)

logger = logging.getLogger(__name__)

def _clean_name(model, name, exclude_id=None) -> str:
    name = (name or '').strip()
    if not name:
        raise InvalidLookupValueError(f"{model.__name__} name is required")

    duplicates = model.objects.filter(name=name)
    if exclude_id is not None:
        duplicates = duplicates.exclude(pk=exclude_id)
    if duplicates.exists():
        raise DuplicateLookupValueError(f"{model.__name__} '{name}' already exists")
    return name


@translate_store_errors
@transaction.atomic
def create_lookup_value(*, model, name: str, created_by: str = 'anonymous'):
    """
    Create a lookup value.

    Args:
        model: PaymentGroup, CropType or WorkType
        name: Unique, non-blank name
        created_by: Actor id

    Raises:
        InvalidLookupValueError: If name is blank
        DuplicateLookupValueError: If name is already taken
    """
    value = model.objects.create(name=_clean_name(model, name), created_by=created_by)
    logger.info("Created %s %s", model.__name__, value.id)
    return value


@translate_store_errors
@transaction.atomic
def rename_lookup_value(*, model, value_id: UUID, name: str):
    """
    Rename a lookup value.

    Raises:
        LookupValueNotFoundError: If the value doesn't exist
        InvalidLookupValueError: If name is blank
        DuplicateLookupValueError: If name is already taken
    """
    value = get_or_not_found(
        model.objects.select_for_update(),
        LookupValueNotFoundError,
        f"{model.__name__} {value_id} not found",
        pk=value_id,
    )
    value.name = _clean_name(model, name, exclude_id=value.pk)
    value.save(update_fields=['name'])
    return value


@translate_store_errors
@transaction.atomic
def delete_lookup_value(*, model, value_id: UUID) -> None:
    """
    Delete a lookup value.

    Raises:
        LookupValueNotFoundError: If the value doesn't exist
    """
    value = get_or_not_found(
        model.objects,
        LookupValueNotFoundError,
        f"{model.__name__} {value_id} not found",
        pk=value_id,
    )
    value.delete()
    logger.info("Deleted %s %s", model.__name__, value_id)
