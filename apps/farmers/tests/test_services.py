import pytest
from uuid import uuid4
from decimal import Decimal

from apps.contracts.models import Contract, PaymentLineKind
from apps.contracts.services import mark_line_paid
from apps.farmers.models import Farmer, Field, FlagCounter
from apps.farmers.services import (
    create_farmer,
    update_farmer,
    delete_farmer,
    search_farmers,
    get_farmer_summary,
    create_field,
    update_field,
    update_field_stage,
    FarmerNotFoundError,
    FieldNotFoundError,
    InvalidFarmerError,
    InvalidFieldError,
)


@pytest.mark.django_db
class TestFarmerManagement:

    def test_create_farmer_copies_subdistrict(self):
        farmer = create_farmer(
            name='이민수',
            phone_number='010-5555-6666',
            address={'full': '전남 해남군 황산면 3', 'subdistrict': '황산면'},
            created_by='user-1',
        )

        assert farmer.subdistrict == '황산면'
        assert farmer.created_by == 'user-1'

    def test_create_farmer_blank_name(self):
        with pytest.raises(InvalidFarmerError):
            create_farmer(name='  ', phone_number='010-0000-0000')
        assert Farmer.objects.count() == 0

    def test_update_farmer_address_updates_subdistrict(self, farmer):
        update_farmer(farmer_id=farmer.id, address={'full': '산이면 5', 'subdistrict': '산이면'})

        farmer.refresh_from_db()
        assert farmer.subdistrict == '산이면'

    def test_update_missing_farmer(self):
        with pytest.raises(FarmerNotFoundError):
            update_farmer(farmer_id=uuid4(), name='누구')

    def test_search_by_name_prefix(self, farmer, other_farmer):
        assert list(search_farmers(search_type='name', value='김')) == [farmer]

    def test_search_by_payment_group(self, farmer, other_farmer):
        assert list(search_farmers(search_type='payment_group', value='B조')) == [other_farmer]

    def test_search_by_subdistrict(self, farmer, other_farmer):
        assert list(search_farmers(search_type='subdistrict', value='화원면')) == [farmer]

    def test_search_without_value_returns_all(self, farmer, other_farmer):
        assert search_farmers().count() == 2

    def test_search_unknown_type(self, farmer):
        with pytest.raises(InvalidFarmerError):
            search_farmers(search_type='email', value='x')

    def test_delete_farmer_removes_fields_keeps_contracts(self, farmer, field, contract_factory):
        contract = contract_factory('1000000')

        delete_farmer(farmer_id=farmer.id)

        assert not Field.objects.filter(pk=field.pk).exists()
        contract.refresh_from_db()
        assert contract.farmer_id is None


@pytest.mark.django_db
class TestFarmerSummary:

    def test_summary_without_contracts(self, farmer, field):
        summary = get_farmer_summary(farmer)

        assert summary['field_count'] == 1
        assert summary['active_contracts'] == 0
        assert summary['total_contract_amount'] == Decimal('0')

    def test_summary_excludes_cancelled(self, farmer, contract_factory):
        contract_factory('1000000', status='active', down='300000', final='700000')
        contract_factory('500000', status='cancelled')
        contract_factory('200000', status='completed')

        summary = get_farmer_summary(farmer)

        assert summary['active_contracts'] == 1
        assert summary['total_contract_amount'] == Decimal('1200000')
        assert summary['remaining_amount'] == Decimal('1200000')

    def test_summary_subtracts_paid_lines(self, farmer, contract_factory):
        contract = contract_factory('1000000', status='active', down='300000', final='700000')
        down = contract.payment_lines.get(kind=PaymentLineKind.DOWN)
        mark_line_paid(contract_id=contract.id, line_id=down.id)

        summary = get_farmer_summary(Farmer.objects.get(pk=farmer.pk))

        assert summary['remaining_amount'] == Decimal('700000')


@pytest.mark.django_db
class TestFieldManagement:

    def test_create_field_builds_default_location(self, farmer):
        field = create_field(
            farmer_id=farmer.id,
            address={'full': '화원면 1-2'},
            area_value='800',
            crop_type='무',
        )

        assert len(field.locations) == 1
        assert field.locations[0]['flag_number'] == 1
        assert field.locations[0]['crop_type'] == '무'
        assert field.current_stage == Field.DEFAULT_STAGE

    def test_create_field_keeps_given_locations(self, farmer):
        locations = [
            {'id': 'a', 'address': {'full': '화원면 1-2'}, 'flag_number': 1},
            {'id': 'b', 'address': {'full': '화원면 1-3'}, 'flag_number': 2},
        ]
        field = create_field(farmer_id=farmer.id, address={'full': '화원면'}, locations=locations)

        assert [loc['id'] for loc in field.locations] == ['a', 'b']

    def test_fields_get_increasing_flag_numbers(self, farmer):
        first = create_field(farmer_id=farmer.id, address={'full': '화원면 1-2'})
        second = create_field(farmer_id=farmer.id, address={'full': '화원면 1-3'})

        assert first.locations[0]['flag_number'] == 1
        assert second.locations[0]['flag_number'] == 2
        assert FlagCounter.objects.get().last_flag_number == 2

    def test_given_flag_numbers_raise_the_counter(self, farmer):
        create_field(
            farmer_id=farmer.id,
            locations=[
                {'id': 'a', 'address': {'full': '화원면 1-2'}, 'flag_number': 7},
                {'id': 'b', 'address': {'full': '화원면 1-3'}},
            ],
        )
        later = create_field(farmer_id=farmer.id, address={'full': '화원면 1-4'})

        assert later.locations[0]['flag_number'] == 9

    def test_unnumbered_locations_numbered_on_update(self, farmer):
        field = create_field(farmer_id=farmer.id, address={'full': '화원면 1-2'})

        field = update_field(
            field_id=field.id,
            locations=field.locations + [{'id': 'new', 'address': {'full': '화원면 1-3'}, 'flag_number': 0}],
        )

        assert [loc['flag_number'] for loc in field.locations] == [1, 2]

    def test_invalid_flag_number(self, farmer):
        with pytest.raises(InvalidFieldError):
            create_field(
                farmer_id=farmer.id,
                locations=[{'id': 'a', 'address': {'full': '화원면'}, 'flag_number': 'x'}],
            )

    def test_create_field_negative_area(self, farmer):
        with pytest.raises(InvalidFieldError):
            create_field(farmer_id=farmer.id, area_value='-1')

    def test_create_field_missing_farmer(self):
        with pytest.raises(FarmerNotFoundError):
            create_field(farmer_id=uuid4())

    def test_update_field(self, field):
        update_field(field_id=field.id, crop_type='무', area_value='1500')

        field.refresh_from_db()
        assert field.crop_type == '무'
        assert field.area_value == Decimal('1500')

    def test_stage_history_appends(self, field):
        update_field_stage(field_id=field.id, stage='계약완료', actor_id='user-1')
        update_field_stage(field_id=field.id, stage='수확중', actor_id='user-2')

        field.refresh_from_db()
        assert field.current_stage == '수확중'
        assert [entry['stage'] for entry in field.stage_history] == ['계약완료', '수확중']
        assert field.stage_history[-1]['by'] == 'user-2'
        assert field.stage_updated_at is not None

    def test_stage_blank(self, field):
        with pytest.raises(InvalidFieldError):
            update_field_stage(field_id=field.id, stage='', actor_id='user-1')

    def test_stage_missing_field(self):
        with pytest.raises(FieldNotFoundError):
            update_field_stage(field_id=uuid4(), stage='수확중', actor_id='user-1')

    def test_contract_survives_field_delete(self, field, contract_factory):
        contract = contract_factory('100')
        contract.fields.add(field)
        field.delete()

        assert Contract.objects.get(pk=contract.pk).fields.count() == 0
