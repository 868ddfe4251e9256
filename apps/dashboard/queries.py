"""
Dashboard Queries
=================

Read-only aggregate queries behind ``/api/dashboard/``.

Example:
    Getting the overview::

        from apps.dashboard.queries import DashboardQueries

        counts = DashboardQueries.overview()
        print(counts['farmers'], counts['schedules']['by_stage']['진행중'])

Note:
    Nothing here writes. Every count is one aggregate query per table.
"""

from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.contracts.models import Contract, ContractStatus, PaymentLine, PaymentLineStatus
from apps.farmers.models import Farmer, Field
from apps.payments.models import Payment, PaymentStatus
from apps.schedules.models import Schedule, WorkStage
from apps.workers.models import Worker, WorkerType


def _counts_by(queryset, field, choices):
    """Count rows per choice value, including choices with no rows."""
    counts = {value: 0 for value in choices}
    for row in queryset.values(field).annotate(count=Count('pk')).order_by():
        counts[row[field]] = row['count']
    return counts


class DashboardQueries:
    """Static aggregate queries for the dashboard."""

    @staticmethod
    def worker_counts():
        by_type = _counts_by(Worker.objects.all(), 'type', WorkerType.values)
        return {'total': sum(by_type.values()), 'by_type': by_type}

    @staticmethod
    def contract_counts():
        by_status = _counts_by(Contract.objects.all(), 'status', ContractStatus.values)
        total_amount = Contract.objects.exclude(status=ContractStatus.CANCELLED).aggregate(
            total=Coalesce(Sum('total_amount'), Decimal('0'), output_field=DecimalField())
        )['total']
        return {
            'total': sum(by_status.values()),
            'by_status': by_status,
            'total_amount': total_amount,
        }

    @staticmethod
    def schedule_counts(today=None):
        today = today or timezone.localdate()
        by_stage = _counts_by(Schedule.objects.all(), 'stage_current', WorkStage.values)
        return {
            'total': sum(by_stage.values()),
            'by_stage': by_stage,
            'today': Schedule.objects.filter(scheduled_start__date=today).count(),
        }

    @staticmethod
    def payment_counts():
        by_status = _counts_by(Payment.objects.all(), 'status', PaymentStatus.values)
        paid_amount = Payment.objects.filter(status=PaymentStatus.COMPLETED).aggregate(
            total=Coalesce(Sum('amount'), Decimal('0'), output_field=DecimalField())
        )['total']
        return {
            'total': sum(by_status.values()),
            'by_status': by_status,
            'paid_amount': paid_amount,
        }

    @staticmethod
    def overdue_payment_lines(today=None):
        """Unpaid contract lines whose due date has passed."""
        today = today or timezone.localdate()
        return (
            PaymentLine.objects
            .exclude(status=PaymentLineStatus.PAID)
            .exclude(contract__status__in=[ContractStatus.COMPLETED, ContractStatus.CANCELLED])
            .filter(due_date__lt=today)
            .count()
        )

    @staticmethod
    def overview(today=None):
        """All dashboard counts in one dictionary."""
        return {
            'farmers': Farmer.objects.count(),
            'fields': Field.objects.count(),
            'workers': DashboardQueries.worker_counts(),
            'contracts': DashboardQueries.contract_counts(),
            'schedules': DashboardQueries.schedule_counts(today),
            'payments': DashboardQueries.payment_counts(),
            'overdue_payment_lines': DashboardQueries.overdue_payment_lines(today),
        }
