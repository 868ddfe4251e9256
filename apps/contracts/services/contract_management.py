"""Contract CRUD."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors
from apps.farmers.models import Farmer, Field
from apps.farmers.services.exceptions import FarmerNotFoundError, FieldNotFoundError

from ..models import (
    Contract,
    ContractStatus,
    PaymentLine,
    PaymentLineKind,
    PaymentLineStatus,
)
from .exceptions import (
    ContractNotFoundError,
    DuplicateContractNumberError,
    InvalidContractError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTRACT_TYPES = ('일반', '특수', '장기')

CONTRACT_FIELDS = (
    'contract_number',
    'contract_date',
    'contract_type',
    'total_amount',
    'details',
    'memo',
)


def _clean_amount(value, label) -> Decimal:
    amount = to_cents(value, InvalidContractError, label)
    if amount < 0:
        raise InvalidContractError(f"{label} must not be negative")
    return amount


def _clean_number(contract_number, exclude_id=None) -> str:
    contract_number = (contract_number or '').strip()
    if not contract_number:
        raise InvalidContractError("Contract number is required")

    duplicates = Contract.objects.filter(contract_number=contract_number)
    if exclude_id is not None:
        duplicates = duplicates.exclude(pk=exclude_id)
    if duplicates.exists():
        raise DuplicateContractNumberError(f"Contract number {contract_number} already exists")
    return contract_number


def _resolve_fields(field_ids: Iterable[UUID]) -> List[Field]:
    field_ids = [str(field_id) for field_id in field_ids]
    fields = list(Field.objects.filter(pk__in=field_ids))
    found = {str(field.id) for field in fields}
    missing = [field_id for field_id in field_ids if field_id not in found]
    if missing:
        raise FieldNotFoundError(f"Fields not found: {', '.join(missing)}")
    return fields


def _line_plan(down_payment, intermediate_payments, final_payment) -> list:
    """Validate the installment plan and return PaymentLine kwargs."""
    plan = [{
        'kind': PaymentLineKind.DOWN,
        'amount': _clean_amount((down_payment or {}).get('amount', 0), 'down payment amount'),
        'due_date': (down_payment or {}).get('due_date'),
    }]

    seen_numbers = set()
    for index, line in enumerate(intermediate_payments or [], start=1):
        number = line.get('installment_number') or index
        if number in seen_numbers:
            raise InvalidContractError(f"Duplicate installment number: {number}")
        seen_numbers.add(number)
        plan.append({
            'kind': PaymentLineKind.INTERMEDIATE,
            'installment_number': number,
            'amount': _clean_amount(line.get('amount', 0), f"installment {number} amount"),
            'due_date': line.get('due_date'),
        })

    plan.append({
        'kind': PaymentLineKind.FINAL,
        'amount': _clean_amount((final_payment or {}).get('amount', 0), 'final payment amount'),
        'due_date': (final_payment or {}).get('due_date'),
    })
    return plan


def _line_key(kind, installment_number=None):
    return (kind, installment_number if kind == PaymentLineKind.INTERMEDIATE else None)


def _replan_lines(contract, down_payment, intermediate_payments, final_payment) -> None:
    """
    Bring the contract's payment lines in line with a new installment plan.

    Parts passed as None keep their current lines. Down and final payment
    dicts are merged over the current line, so ``{amount}`` alone keeps the
    due date. A given intermediate list replaces the current one. Paid lines
    must come through unchanged.
    """
    lines = {
        _line_key(line.kind, line.installment_number): line
        for line in contract.payment_lines.select_for_update()
    }

    def current(kind):
        line = lines.get(_line_key(kind))
        return {'amount': line.amount, 'due_date': line.due_date} if line else {}

    if intermediate_payments is None:
        intermediate_payments = [
            {'installment_number': number, 'amount': line.amount, 'due_date': line.due_date}
            for (kind, number), line in sorted(lines.items(), key=lambda item: item[0][1] or 0)
            if kind == PaymentLineKind.INTERMEDIATE
        ]
    plan = _line_plan(
        {**current(PaymentLineKind.DOWN), **(down_payment or {})},
        intermediate_payments,
        {**current(PaymentLineKind.FINAL), **(final_payment or {})},
    )
    wanted = {_line_key(entry['kind'], entry.get('installment_number')): entry for entry in plan}

    removed = []
    for key, line in lines.items():
        entry = wanted.get(key)
        if entry is None:
            if line.status == PaymentLineStatus.PAID:
                raise InvalidContractError(f"Paid line {line} cannot be removed")
            removed.append(line.pk)
            continue
        if entry['amount'] == line.amount and entry['due_date'] == line.due_date:
            continue
        if line.status == PaymentLineStatus.PAID:
            raise InvalidContractError(f"Paid line {line} cannot be changed")
        line.amount = entry['amount']
        line.due_date = entry['due_date']
        line.save(update_fields=['amount', 'due_date'])

    PaymentLine.objects.filter(pk__in=removed).delete()
    PaymentLine.objects.bulk_create([
        PaymentLine(contract=contract, status=PaymentLineStatus.UNPAID, **entry)
        for key, entry in wanted.items()
        if key not in lines
    ])


def get_contract_by_id(*, contract_id: UUID) -> Contract:
    """
    Get a contract by ID with its payment lines.

    Raises:
        ContractNotFoundError: If contract doesn't exist
    """
    return get_or_not_found(
        Contract.objects.select_related('farmer').prefetch_related('payment_lines', 'fields'),
        ContractNotFoundError,
        f"Contract {contract_id} not found",
        pk=contract_id,
    )


def list_contracts(*, farmer_id: Optional[UUID] = None, status: Optional[str] = None) -> QuerySet:
    queryset = Contract.objects.select_related('farmer').prefetch_related('payment_lines', 'fields')
    if farmer_id:
        queryset = queryset.filter(farmer_id=farmer_id)
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def get_contract_types() -> List[str]:
    """Default contract types plus every type already in use, sorted."""
    used = Contract.objects.exclude(contract_type='').values_list('contract_type', flat=True).distinct()
    return sorted(set(DEFAULT_CONTRACT_TYPES) | set(used))


@translate_store_errors
@transaction.atomic
def create_contract(
    *,
    farmer_id: UUID,
    contract_number: str,
    contract_date,
    total_amount,
    down_payment: dict,
    final_payment: dict,
    intermediate_payments: Optional[list] = None,
    field_ids: Optional[list] = None,
    contract_type: str = '일반',
    status: str = ContractStatus.PENDING,
    details: Optional[dict] = None,
    memo: str = '',
    created_by: str = 'anonymous'
) -> Contract:
    """
    Create a contract and its payment lines, all unpaid.

    Args:
        farmer_id: Contracting farmer
        contract_number: Unique, non-blank number
        contract_date: Date signed
        total_amount: Non-negative total
        down_payment: ``{amount, due_date}``
        final_payment: ``{amount, due_date}``
        intermediate_payments: List of ``{installment_number?, amount, due_date}``;
            missing installment numbers follow list position
        field_ids: Fields covered by the contract
        contract_type: Free-text type label
        status: Initial contract status
        details: Harvest period, unit price and other terms
        memo: Free text
        created_by: Actor id

    Returns:
        Created Contract

    Raises:
        InvalidContractError: If a field is blank or an amount is negative
        DuplicateContractNumberError: If the number is already used
        FarmerNotFoundError: If farmer doesn't exist
        FieldNotFoundError: If any field doesn't exist
    """
    contract_number = _clean_number(contract_number)
    total_amount = _clean_amount(total_amount, 'total amount')
    if status not in ContractStatus.values:
        raise InvalidContractError(f"Invalid contract status: {status}")
    if contract_date is None:
        raise InvalidContractError("Contract date is required")
    plan = _line_plan(down_payment, intermediate_payments, final_payment)

    farmer = get_or_not_found(
        Farmer.objects,
        FarmerNotFoundError,
        f"Farmer {farmer_id} not found",
        pk=farmer_id,
    )
    fields = _resolve_fields(field_ids or [])

    contract = Contract.objects.create(
        farmer=farmer,
        contract_number=contract_number,
        contract_date=contract_date,
        contract_type=contract_type or '일반',
        status=status,
        total_amount=total_amount,
        details=details or {},
        memo=memo or '',
        created_by=created_by,
    )
    contract.fields.set(fields)

    PaymentLine.objects.bulk_create([
        PaymentLine(contract=contract, status=PaymentLineStatus.UNPAID, **line)
        for line in plan
    ])

    logger.info(
        "Created contract %s (%s) for farmer %s with %d payment lines",
        contract.id, contract.contract_number, farmer.id, len(plan),
    )
    return contract


@translate_store_errors
@transaction.atomic
def update_contract(
    *,
    contract_id: UUID,
    field_ids: Optional[list] = None,
    down_payment: Optional[dict] = None,
    intermediate_payments: Optional[list] = None,
    final_payment: Optional[dict] = None,
    **fields
) -> Contract:
    """
    Merge ``fields`` into a contract and optionally re-plan its payment lines.

    Unpaid lines take new amounts and due dates, intermediates missing from a
    given ``intermediate_payments`` list are removed and new ones are added
    unpaid. Status and paying a line have their own operations.

    Raises:
        ContractNotFoundError: If contract doesn't exist
        InvalidContractError: If a value is invalid or a paid line would change
        DuplicateContractNumberError: If the new number is already used
        FieldNotFoundError: If any field doesn't exist
    """
    contract = get_or_not_found(
        Contract.objects.select_for_update(),
        ContractNotFoundError,
        f"Contract {contract_id} not found",
        pk=contract_id,
    )

    update_fields = ['updated_at']
    for name in CONTRACT_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == 'contract_number':
            value = _clean_number(value, exclude_id=contract.pk)
        elif name == 'total_amount':
            value = _clean_amount(value, 'total amount')
        setattr(contract, name, value)
        update_fields.append(name)

    contract.save(update_fields=update_fields)

    if field_ids is not None:
        contract.fields.set(_resolve_fields(field_ids))

    if any(part is not None for part in (down_payment, intermediate_payments, final_payment)):
        _replan_lines(contract, down_payment, intermediate_payments, final_payment)

    return contract


@translate_store_errors
@transaction.atomic
def update_contract_status(*, contract_id: UUID, status: str) -> Contract:
    """
    Set the contract status explicitly.

    Raises:
        ContractNotFoundError: If contract doesn't exist
        InvalidContractError: If status is unknown
    """
    if status not in ContractStatus.values:
        raise InvalidContractError(f"Invalid contract status: {status}")

    contract = get_or_not_found(
        Contract.objects.select_for_update(),
        ContractNotFoundError,
        f"Contract {contract_id} not found",
        pk=contract_id,
    )
    previous = contract.status
    contract.status = status
    contract.save(update_fields=['status', 'updated_at'])

    logger.info("Contract %s status %s -> %s", contract.id, previous, status)
    return contract


@translate_store_errors
@transaction.atomic
def delete_contract(*, contract_id: UUID) -> None:
    """
    Delete a contract and its payment lines.

    Raises:
        ContractNotFoundError: If contract doesn't exist
    """
    contract = get_or_not_found(
        Contract.objects,
        ContractNotFoundError,
        f"Contract {contract_id} not found",
        pk=contract_id,
    )
    contract.delete()
    logger.info("Deleted contract %s", contract_id)
