import pytest
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from apps.catalog.models import Category
from apps.catalog.services import CategoryNotFoundError
from apps.farmers.services import FieldNotFoundError
from apps.schedules.models import AdditionalSettlement, Schedule, StageTransition
from apps.schedules.services import (
    create_schedule,
    update_schedule,
    delete_schedule,
    list_schedules,
    settlement_total,
    record_completion_details,
    add_additional_settlement,
    InvalidScheduleError,
)


@pytest.mark.django_db
class TestCreateSchedule:

    def test_farmer_taken_from_field(self, schedule, farmer):
        assert schedule.farmer_id == farmer.id
        assert schedule.payment_status == 'pending'

    def test_unknown_work_type(self, start_time):
        with pytest.raises(InvalidScheduleError):
            create_schedule(work_type='weeding', scheduled_start=start_time, actor_id='user-1')
        assert Schedule.objects.count() == 0

    def test_end_before_start(self, start_time):
        with pytest.raises(InvalidScheduleError):
            create_schedule(
                work_type='pulling',
                scheduled_start=start_time,
                scheduled_end=start_time - timedelta(hours=1),
                actor_id='user-1',
            )

    def test_negative_rate(self, start_time):
        with pytest.raises(InvalidScheduleError):
            create_schedule(
                work_type='pulling',
                scheduled_start=start_time,
                base_rate=Decimal('-1'),
                actor_id='user-1',
            )

    def test_nan_rate(self, start_time):
        with pytest.raises(InvalidScheduleError):
            create_schedule(
                work_type='pulling',
                scheduled_start=start_time,
                base_rate='NaN',
                actor_id='user-1',
            )
        assert Schedule.objects.count() == 0

    def test_rate_rounded_to_cents(self, start_time):
        schedule = create_schedule(
            work_type='pulling',
            scheduled_start=start_time,
            base_rate='500.005',
            actor_id='user-1',
        )
        assert schedule.base_rate == Decimal('500.01')

    def test_missing_field(self, start_time):
        with pytest.raises(FieldNotFoundError):
            create_schedule(
                work_type='pulling',
                scheduled_start=start_time,
                field_id=uuid4(),
                actor_id='user-1',
            )
        assert StageTransition.objects.count() == 0

    def test_transport_info_kept(self, start_time):
        schedule = create_schedule(
            work_type='transport',
            scheduled_start=start_time,
            actor_id='user-1',
            transport_info={'origin': '화원면', 'destination': '광주', 'distance': 80},
        )
        assert schedule.transport_info['destination'] == '광주'


@pytest.mark.django_db
class TestUpdateAndDelete:

    def test_update_rates(self, schedule):
        update_schedule(schedule_id=schedule.id, negotiated_rate=Decimal('550'), memo='비 예보')

        schedule.refresh_from_db()
        assert schedule.negotiated_rate == Decimal('550')
        assert schedule.memo == '비 예보'

    def test_update_cannot_clear_base_rate(self, schedule):
        with pytest.raises(InvalidScheduleError):
            update_schedule(schedule_id=schedule.id, base_rate=None)

    def test_update_ignores_stage(self, schedule):
        update_schedule(schedule_id=schedule.id, stage_current='완료')

        schedule.refresh_from_db()
        assert schedule.stage_current == '예정'

    def test_delete_removes_history(self, schedule):
        delete_schedule(schedule_id=schedule.id)

        assert Schedule.objects.count() == 0
        assert StageTransition.objects.count() == 0

    def test_list_filters(self, schedule, foreman, start_time):
        create_schedule(work_type='pulling', scheduled_start=start_time, actor_id='user-1')

        assert list(list_schedules(worker_id=foreman.id)) == [schedule]
        assert list_schedules(work_type='pulling').count() == 1
        assert list_schedules(stage='예정').count() == 2
        assert list_schedules(payment_status='completed').count() == 0


@pytest.mark.django_db
class TestSettlement:

    def test_total_without_quantity_is_extras_only(self, schedule):
        assert settlement_total(schedule) == Decimal('0')

    def test_total_uses_base_rate(self, schedule):
        schedule.quantity = Decimal('10')
        assert settlement_total(schedule) == Decimal('5000')

    def test_total_prefers_negotiated_rate(self, schedule):
        schedule.quantity = Decimal('10')
        schedule.negotiated_rate = Decimal('600')
        schedule.additional_amount = Decimal('1000')
        assert settlement_total(schedule) == Decimal('7000')

    def test_negotiated_zero_is_used(self, schedule):
        schedule.quantity = Decimal('10')
        schedule.negotiated_rate = Decimal('0')
        assert settlement_total(schedule) == Decimal('0')

    def test_additional_settlements_added(self, schedule):
        add_additional_settlement(schedule_id=schedule.id, amount=Decimal('20000'), reason='야간 작업')
        add_additional_settlement(schedule_id=schedule.id, amount=Decimal('5000'))

        schedule = Schedule.objects.get(pk=schedule.pk)
        schedule.quantity = Decimal('4')
        assert settlement_total(schedule) == Decimal('27000')

    def test_additional_settlement_with_category(self, schedule):
        category = Category.objects.create(name='포장', order=0)
        settlement = add_additional_settlement(
            schedule_id=schedule.id, amount=Decimal('3000'), category_id=category.id
        )
        assert settlement.category == category

    def test_additional_settlement_unknown_category(self, schedule):
        with pytest.raises(CategoryNotFoundError):
            add_additional_settlement(schedule_id=schedule.id, amount=Decimal('3000'), category_id=uuid4())
        assert AdditionalSettlement.objects.count() == 0

    def test_record_completion_details(self, schedule):
        record_completion_details(
            schedule_id=schedule.id,
            quantity=Decimal('120'),
            unit='망',
            work_price=Decimal('520'),
            notes='오후 마감',
            harvest_amount=Decimal('3.5'),
        )

        schedule.refresh_from_db()
        assert schedule.quantity == Decimal('120')
        assert schedule.negotiated_rate == Decimal('520')
        assert schedule.stage_current == '예정'
        assert schedule.completion_details['harvest_amount'] == '3.5'
        assert schedule.completion_details['notes'] == '오후 마감'
        assert settlement_total(schedule) == Decimal('62400')

    def test_record_completion_without_price_keeps_rate(self, schedule):
        record_completion_details(schedule_id=schedule.id, quantity=Decimal('10'), unit='망')

        schedule.refresh_from_db()
        assert schedule.negotiated_rate is None
        assert schedule.completion_details['work_price'] is None

    def test_record_completion_negative_quantity(self, schedule):
        with pytest.raises(InvalidScheduleError):
            record_completion_details(schedule_id=schedule.id, quantity=Decimal('-1'), unit='망')

    def test_record_completion_nan_quantity(self, schedule):
        with pytest.raises(InvalidScheduleError):
            record_completion_details(schedule_id=schedule.id, quantity='NaN', unit='망')

        schedule.refresh_from_db()
        assert schedule.completion_details == {}

    def test_additional_settlement_infinite_amount(self, schedule):
        with pytest.raises(InvalidScheduleError):
            add_additional_settlement(schedule_id=schedule.id, amount='Infinity', reason='야간')
        assert AdditionalSettlement.objects.count() == 0


class TestAdditionalSettlementAdmin:

    def test_inline_is_read_only(self):
        from django.contrib.admin.sites import site
        from apps.schedules.admin import AdditionalSettlementInline

        inline = AdditionalSettlementInline(Schedule, site)

        assert inline.can_delete is False
        assert inline.has_add_permission(None) is False
        assert inline.has_change_permission(None) is False
        assert set(inline.readonly_fields) == {'amount', 'reason', 'date', 'category'}
