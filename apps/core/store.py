"""
Helpers around the database layer.

Service functions that write are wrapped with ``translate_store_errors`` so a
failing database call surfaces as ``StoreError`` instead of a driver-specific
exception. The original exception is chained and logged.
"""
import functools
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from .exceptions import StoreError

logger = logging.getLogger(__name__)


def translate_store_errors(func):
    """Re-raise ``DatabaseError`` from ``func`` as ``StoreError``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as e:
            logger.exception("Store call failed in %s", func.__qualname__)
            raise StoreError(f"Store call failed: {e}") from e

    return wrapper


def get_or_not_found(queryset, error_class, message, **lookup):
    """
    Fetch one row or raise ``error_class``.

    Args:
        queryset: Manager or QuerySet to look in
        error_class: NotFoundError subclass to raise
        message: Error message when nothing matches
        **lookup: Field lookups passed to ``get()``

    Returns:
        Model instance
    """
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, DjangoValidationError):
        raise error_class(message)
