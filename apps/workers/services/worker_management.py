"""Worker CRUD and search."""

import logging
import re
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.core.store import get_or_not_found, translate_store_errors

from ..models import Worker, WorkerType
from .exceptions import InvalidWorkerError, WorkerNotFoundError

logger = logging.getLogger(__name__)

WORKER_FIELDS = (
    'name',
    'phone_number',
    'personal_id',
    'address',
    'bank_info',
    'foreman_info',
    'driver_info',
    'memo',
)

SEARCH_TYPES = ('name', 'phone_number', 'vehicle_number')


def vehicle_number_last4(vehicle_number: str) -> str:
    """Last four characters of a vehicle number, whitespace removed."""
    return re.sub(r'\s', '', vehicle_number or '')[-4:]


def _normalize_driver_info(driver_info: Optional[dict]) -> dict:
    driver_info = dict(driver_info or {})
    if driver_info.get('vehicle_number'):
        driver_info['vehicle_number_last4'] = vehicle_number_last4(driver_info['vehicle_number'])
    driver_info.setdefault('rates', {})
    return driver_info


def _normalize_foreman_info(foreman_info: Optional[dict]) -> dict:
    foreman_info = dict(foreman_info or {})
    foreman_info.setdefault('category_ids', [])
    foreman_info.setdefault('rates', [])
    return foreman_info


def get_worker_by_id(*, worker_id: UUID) -> Worker:
    """
    Get a worker by ID.

    Raises:
        WorkerNotFoundError: If worker doesn't exist
    """
    return get_or_not_found(
        Worker.objects,
        WorkerNotFoundError,
        f"Worker {worker_id} not found",
        pk=worker_id,
    )


def search_workers(
    *,
    worker_type: Optional[str] = None,
    search_type: Optional[str] = None,
    value: Optional[str] = None
) -> QuerySet:
    """
    Search workers, optionally restricted to one type.

    ``name`` matches by prefix. ``vehicle_number`` only applies to drivers
    and matches the last four digits when the value is four characters or
    shorter, the full vehicle number otherwise.

    Raises:
        InvalidWorkerError: If worker_type or search_type is unknown
    """
    queryset = Worker.objects.order_by('name')

    if worker_type:
        if worker_type not in WorkerType.values:
            raise InvalidWorkerError(f"Unknown worker type: {worker_type}")
        queryset = queryset.filter(type=worker_type)

    if not value:
        return queryset

    search_type = search_type or 'name'
    if search_type not in SEARCH_TYPES:
        raise InvalidWorkerError(f"Unknown search type: {search_type}")

    if search_type == 'name':
        return queryset.filter(name__startswith=value)
    if search_type == 'phone_number':
        return queryset.filter(phone_number=value)

    queryset = queryset.filter(type=WorkerType.DRIVER)
    if len(value) <= 4:
        return queryset.filter(driver_info__vehicle_number_last4=value)
    return queryset.filter(driver_info__vehicle_number=value)


def get_foremen_by_category(*, category_id: UUID) -> List[Worker]:
    """Foremen whose ``foreman_info`` lists ``category_id``."""
    category_id = str(category_id)
    return [
        worker
        for worker in Worker.objects.filter(type=WorkerType.FOREMAN)
        if category_id in [str(c) for c in worker.foreman_info.get('category_ids', [])]
    ]


@translate_store_errors
@transaction.atomic
def create_worker(
    *,
    worker_type: str,
    name: str,
    phone_number: str = '',
    personal_id: str = '',
    address: Optional[dict] = None,
    bank_info: Optional[dict] = None,
    foreman_info: Optional[dict] = None,
    driver_info: Optional[dict] = None,
    memo: str = ''
) -> Worker:
    """
    Register a foreman or a driver.

    Drivers get ``driver_info['vehicle_number_last4']`` derived from their
    vehicle number. Only the info block matching the type is stored.

    Raises:
        InvalidWorkerError: If type is unknown or name is blank
    """
    if worker_type not in WorkerType.values:
        raise InvalidWorkerError(f"Unknown worker type: {worker_type}")

    name = (name or '').strip()
    if not name:
        raise InvalidWorkerError("Worker name is required")

    is_driver = worker_type == WorkerType.DRIVER
    worker = Worker.objects.create(
        type=worker_type,
        name=name,
        phone_number=phone_number or '',
        personal_id=personal_id or '',
        address=address or {},
        bank_info=bank_info or {},
        foreman_info={} if is_driver else _normalize_foreman_info(foreman_info),
        driver_info=_normalize_driver_info(driver_info) if is_driver else {},
        memo=memo or '',
    )
    logger.info("Created %s %s", worker.type, worker.id)
    return worker


@translate_store_errors
@transaction.atomic
def update_worker(*, worker_id: UUID, **fields) -> Worker:
    """
    Merge ``fields`` into a worker. The worker type cannot change.

    Raises:
        WorkerNotFoundError: If worker doesn't exist
        InvalidWorkerError: If name would become blank
    """
    worker = get_or_not_found(
        Worker.objects.select_for_update(),
        WorkerNotFoundError,
        f"Worker {worker_id} not found",
        pk=worker_id,
    )

    update_fields = ['updated_at']
    for field in WORKER_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if field == 'name':
            value = (value or '').strip()
            if not value:
                raise InvalidWorkerError("Worker name is required")
        elif field == 'driver_info':
            if worker.type != WorkerType.DRIVER:
                continue
            value = _normalize_driver_info(value)
        elif field == 'foreman_info':
            if worker.type != WorkerType.FOREMAN:
                continue
            value = _normalize_foreman_info(value)
        setattr(worker, field, value)
        update_fields.append(field)

    worker.save(update_fields=update_fields)
    return worker


@translate_store_errors
@transaction.atomic
def delete_worker(*, worker_id: UUID) -> None:
    """
    Delete a worker.

    Raises:
        WorkerNotFoundError: If worker doesn't exist
    """
    worker = get_worker_by_id(worker_id=worker_id)
    worker.delete()
    logger.info("Deleted worker %s", worker_id)
