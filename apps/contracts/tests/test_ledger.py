import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from apps.contracts.models import Contract, ContractStatus, PaymentLineKind, PaymentLineStatus
from apps.contracts.services import (
    compute_paid_to_date,
    compute_outstanding,
    lines_settled,
    next_due_payment,
    ordered_lines,
    mark_line_paid,
    schedule_line,
    ContractNotFoundError,
    PaymentLineNotFoundError,
)


def reload(contract):
    return Contract.objects.prefetch_related('payment_lines').get(pk=contract.pk)


@pytest.mark.django_db
class TestPaidToDate:

    def test_only_intermediate_paid(self, contract, line_of, set_line_status):
        set_line_status(line_of(PaymentLineKind.INTERMEDIATE))
        contract = reload(contract)

        assert compute_paid_to_date(contract) == Decimal('400000')
        assert compute_outstanding(contract) == Decimal('600000')

    def test_nothing_paid(self, contract):
        assert compute_paid_to_date(contract) == Decimal('0')
        assert compute_outstanding(contract) == contract.total_amount

    def test_nominal_amount_counts_not_paid_amount(self, contract, line_of):
        down = line_of(PaymentLineKind.DOWN)
        mark_line_paid(contract_id=contract.id, line_id=down.id, paid_amount=Decimal('100000'))

        assert compute_paid_to_date(reload(contract)) == Decimal('300000')

    def test_outstanding_can_go_negative(self, contract, line_of, set_line_status):
        for kind in (PaymentLineKind.DOWN, PaymentLineKind.INTERMEDIATE, PaymentLineKind.FINAL):
            set_line_status(line_of(kind))
        contract.total_amount = Decimal('900000')
        contract.save()

        assert compute_outstanding(reload(contract)) == Decimal('-100000')

    def test_outstanding_identity(self, contract, line_of, set_line_status):
        set_line_status(line_of(PaymentLineKind.FINAL))
        contract = reload(contract)

        assert compute_outstanding(contract) == contract.total_amount - compute_paid_to_date(contract)


@pytest.mark.django_db
class TestNextDuePayment:

    def test_down_payment_first(self, contract):
        assert next_due_payment(contract).kind == PaymentLineKind.DOWN

    def test_intermediate_after_down(self, contract, line_of, set_line_status):
        set_line_status(line_of(PaymentLineKind.DOWN))
        assert next_due_payment(reload(contract)).kind == PaymentLineKind.INTERMEDIATE

    def test_scheduled_line_is_still_due(self, contract, line_of, set_line_status):
        set_line_status(line_of(PaymentLineKind.DOWN), PaymentLineStatus.SCHEDULED)
        assert next_due_payment(reload(contract)).kind == PaymentLineKind.DOWN

    def test_none_when_all_paid(self, contract, line_of, set_line_status):
        for kind in (PaymentLineKind.DOWN, PaymentLineKind.INTERMEDIATE, PaymentLineKind.FINAL):
            set_line_status(line_of(kind))
        contract = reload(contract)

        assert next_due_payment(contract) is None
        assert lines_settled(contract) is True

    def test_none_when_completed(self, contract):
        contract.status = ContractStatus.COMPLETED
        contract.save()

        assert next_due_payment(reload(contract)) is None
        assert lines_settled(reload(contract)) is False

    def test_intermediates_in_installment_order(self, farmer):
        from apps.contracts.services import create_contract

        contract = create_contract(
            farmer_id=farmer.id,
            contract_number='2026-009',
            contract_date=date(2026, 3, 1),
            total_amount=Decimal('100'),
            down_payment={'amount': Decimal('10')},
            intermediate_payments=[
                {'installment_number': 2, 'amount': Decimal('30')},
                {'installment_number': 1, 'amount': Decimal('20')},
            ],
            final_payment={'amount': Decimal('40')},
        )

        lines = ordered_lines(reload(contract))
        assert [(line.kind, line.installment_number) for line in lines] == [
            ('down', None),
            ('intermediate', 1),
            ('intermediate', 2),
            ('final', None),
        ]


@pytest.mark.django_db
class TestMarkLine:

    def test_mark_paid_sets_metadata(self, contract, line_of):
        final = line_of(PaymentLineKind.FINAL)
        line = mark_line_paid(
            contract_id=contract.id,
            line_id=final.id,
            paid_date=date(2026, 7, 2),
            paid_amount=Decimal('290000'),
            receipt_ref='R-77',
        )

        assert line.status == PaymentLineStatus.PAID
        assert line.paid_date == date(2026, 7, 2)
        assert line.paid_amount == Decimal('290000')
        assert line.receipt_ref == 'R-77'

    def test_mark_paid_does_not_touch_contract_status(self, contract, line_of):
        for kind in (PaymentLineKind.DOWN, PaymentLineKind.INTERMEDIATE, PaymentLineKind.FINAL):
            mark_line_paid(contract_id=contract.id, line_id=line_of(kind).id)

        contract.refresh_from_db()
        assert contract.status == ContractStatus.PENDING

    def test_line_from_other_contract(self, contract, farmer):
        from apps.contracts.services import create_contract

        other = create_contract(
            farmer_id=farmer.id,
            contract_number='2026-002',
            contract_date=date(2026, 3, 1),
            total_amount=Decimal('10'),
            down_payment={'amount': Decimal('5')},
            final_payment={'amount': Decimal('5')},
        )
        foreign_line = other.payment_lines.get(kind=PaymentLineKind.DOWN)

        with pytest.raises(PaymentLineNotFoundError):
            mark_line_paid(contract_id=contract.id, line_id=foreign_line.id)

    def test_missing_contract(self):
        with pytest.raises(ContractNotFoundError):
            mark_line_paid(contract_id=uuid4(), line_id=uuid4())

    def test_schedule_line(self, contract, line_of):
        line = schedule_line(contract_id=contract.id, line_id=line_of(PaymentLineKind.DOWN).id)
        assert line.status == PaymentLineStatus.SCHEDULED
