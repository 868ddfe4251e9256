"""
Catalog app services layer.

Category chain management, category rates, and the flat lookup values
(payment groups, crop types, work types).
"""

from .exceptions import (
    CategoryNotFoundError,
    RateNotFoundError,
    InvalidCategoryError,
    InvalidRateError,
    LookupValueNotFoundError,
    DuplicateLookupValueError,
    InvalidLookupValueError,
)

from .category_chain import (
    CategoryChain,
    list_categories,
    get_category_by_id,
    create_category,
    update_category,
    set_next_category,
    delete_category,
    reorder_categories,
    move_category,
    get_chain_from,
)

from .rate_management import (
    add_rate,
    update_rate,
    remove_rate,
)

from .lookup_management import (
    create_lookup_value,
    rename_lookup_value,
    delete_lookup_value,
)

from .lookup_cache import LookupCache


__all__ = [
    # Exceptions
    'CategoryNotFoundError',
    'RateNotFoundError',
    'InvalidCategoryError',
    'InvalidRateError',
    'LookupValueNotFoundError',
    'DuplicateLookupValueError',
    'InvalidLookupValueError',

    # Category chain
    'CategoryChain',
    'list_categories',
    'get_category_by_id',
    'create_category',
    'update_category',
    'set_next_category',
    'delete_category',
    'reorder_categories',
    'move_category',
    'get_chain_from',

    # Rates
    'add_rate',
    'update_rate',
    'remove_rate',

    # Lookup values
    'create_lookup_value',
    'rename_lookup_value',
    'delete_lookup_value',
    'LookupCache',
]
