"""Workers app services layer."""

from .exceptions import (
    WorkerNotFoundError,
    InvalidWorkerError,
)

from .worker_management import (
    vehicle_number_last4,
    get_worker_by_id,
    search_workers,
    get_foremen_by_category,
    create_worker,
    update_worker,
    delete_worker,
)


__all__ = [
    # Exceptions
    'WorkerNotFoundError',
    'InvalidWorkerError',

    # Workers
    'vehicle_number_last4',
    'get_worker_by_id',
    'search_workers',
    'get_foremen_by_category',
    'create_worker',
    'update_worker',
    'delete_worker',
]
