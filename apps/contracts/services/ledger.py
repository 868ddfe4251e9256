"""
Contract installment ledger.

A contract has one down payment, any number of intermediate installments
and one final payment. Paid-to-date sums the nominal ``amount`` of every
line marked paid, not the recorded ``paid_amount``, so a partially paid
line counts in full once it is flagged paid.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.core.store import get_or_not_found, translate_store_errors

from ..models import (
    Contract,
    ContractStatus,
    PaymentLine,
    PaymentLineKind,
    PaymentLineStatus,
)
from .exceptions import ContractNotFoundError, PaymentLineNotFoundError

logger = logging.getLogger(__name__)

KIND_ORDER = {
    PaymentLineKind.DOWN: 0,
    PaymentLineKind.INTERMEDIATE: 1,
    PaymentLineKind.FINAL: 2,
}


def ordered_lines(contract: Contract) -> List[PaymentLine]:
    """Down payment, intermediates by installment number, then final payment."""
    return sorted(
        contract.payment_lines.all(),
        key=lambda line: (KIND_ORDER[line.kind], line.installment_number or 0),
    )


def compute_paid_to_date(contract: Contract) -> Decimal:
    return sum(
        (line.amount for line in contract.payment_lines.all() if line.status == PaymentLineStatus.PAID),
        Decimal('0'),
    )


def compute_outstanding(contract: Contract) -> Decimal:
    """``total_amount - paid_to_date``; negative results are returned as-is."""
    return contract.total_amount - compute_paid_to_date(contract)


def lines_settled(contract: Contract) -> bool:
    """True when every payment line is paid, whatever the contract status says."""
    return all(line.status == PaymentLineStatus.PAID for line in contract.payment_lines.all())


def next_due_payment(contract: Contract) -> Optional[PaymentLine]:
    """
    First line that is not paid yet.

    Returns None when every line is paid or the contract is completed.
    """
    if contract.status == ContractStatus.COMPLETED:
        return None

    for line in ordered_lines(contract):
        if line.status != PaymentLineStatus.PAID:
            return line
    return None


def _lock_line(contract_id, line_id) -> PaymentLine:
    contract = get_or_not_found(
        Contract.objects,
        ContractNotFoundError,
        f"Contract {contract_id} not found",
        pk=contract_id,
    )
    return get_or_not_found(
        PaymentLine.objects.select_for_update().filter(contract=contract),
        PaymentLineNotFoundError,
        f"Payment line {line_id} not found in contract {contract_id}",
        pk=line_id,
    )


@translate_store_errors
@transaction.atomic
def mark_line_paid(
    *,
    contract_id: UUID,
    line_id: UUID,
    paid_date=None,
    paid_amount: Optional[Decimal] = None,
    receipt_ref: str = ''
) -> PaymentLine:
    """
    Mark a payment line as paid and attach the payment metadata.

    Nothing is checked against the contract total.

    Args:
        contract_id: Owning contract
        line_id: Payment line to mark
        paid_date: Date paid (defaults to today)
        paid_amount: Amount actually received, if known
        receipt_ref: Opaque receipt reference

    Raises:
        ContractNotFoundError: If contract doesn't exist
        PaymentLineNotFoundError: If the line isn't part of the contract
    """
    line = _lock_line(contract_id, line_id)

    line.status = PaymentLineStatus.PAID
    line.paid_date = paid_date or timezone.localdate()
    line.paid_amount = paid_amount
    line.receipt_ref = receipt_ref or ''
    line.save(update_fields=['status', 'paid_date', 'paid_amount', 'receipt_ref'])

    logger.info("Contract %s line %s marked paid", contract_id, line.id)
    return line


@translate_store_errors
@transaction.atomic
def schedule_line(*, contract_id: UUID, line_id: UUID) -> PaymentLine:
    """
    Mark a payment line as scheduled.

    Raises:
        ContractNotFoundError: If contract doesn't exist
        PaymentLineNotFoundError: If the line isn't part of the contract
    """
    line = _lock_line(contract_id, line_id)

    line.status = PaymentLineStatus.SCHEDULED
    line.save(update_fields=['status'])
    return line
