"""
Payments app services layer.

Settlement payments to workers and their links to schedules.
"""

from .exceptions import (
    PaymentNotFoundError,
    InvalidPaymentError,
    ScheduleAlreadySettledError,
)

from .settlement_builder import (
    schedule_status_for,
    get_payment_by_id,
    list_payments,
    create_payment,
    update_payment,
    update_payment_status,
    delete_payment,
)


__all__ = [
    # Exceptions
    'PaymentNotFoundError',
    'InvalidPaymentError',
    'ScheduleAlreadySettledError',

    # Settlements
    'schedule_status_for',
    'get_payment_by_id',
    'list_payments',
    'create_payment',
    'update_payment',
    'update_payment_status',
    'delete_payment',
]
