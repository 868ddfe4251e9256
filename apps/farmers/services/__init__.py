"""
Farmers app services layer.

Farmer records, their fields, and the field stage history.
"""

from .exceptions import (
    FarmerNotFoundError,
    FieldNotFoundError,
    InvalidFarmerError,
    InvalidFieldError,
)

from .farmer_management import (
    get_farmer_by_id,
    search_farmers,
    create_farmer,
    update_farmer,
    delete_farmer,
    get_farmer_summary,
)

from .field_management import (
    get_field_by_id,
    list_fields,
    create_field,
    update_field,
    delete_field,
    update_field_stage,
)


__all__ = [
    # Exceptions
    'FarmerNotFoundError',
    'FieldNotFoundError',
    'InvalidFarmerError',
    'InvalidFieldError',

    # Farmers
    'get_farmer_by_id',
    'search_farmers',
    'create_farmer',
    'update_farmer',
    'delete_farmer',
    'get_farmer_summary',

    # Fields
    'get_field_by_id',
    'list_fields',
    'create_field',
    'update_field',
    'delete_field',
    'update_field_stage',
]
