import pytest
from uuid import uuid4

from apps.workers.models import Worker
from apps.workers.services import (
    vehicle_number_last4,
    create_worker,
    update_worker,
    delete_worker,
    search_workers,
    get_foremen_by_category,
    InvalidWorkerError,
    WorkerNotFoundError,
)


class TestVehicleNumberLast4:

    def test_strips_whitespace(self):
        assert vehicle_number_last4('전남 12 가 3456') == '3456'

    def test_short_number(self):
        assert vehicle_number_last4('1 2') == '12'

    def test_empty(self):
        assert vehicle_number_last4('') == ''


@pytest.mark.django_db
class TestWorkerManagement:

    def test_create_driver_derives_last4(self, driver):
        assert driver.type == 'driver'
        assert driver.driver_info['vehicle_number_last4'] == '3456'
        assert driver.foreman_info == {}

    def test_create_foreman_defaults(self, foreman):
        assert foreman.foreman_info['rates'] == []
        assert foreman.driver_info == {}

    def test_create_unknown_type(self):
        with pytest.raises(InvalidWorkerError):
            create_worker(worker_type='cook', name='누구')
        assert Worker.objects.count() == 0

    def test_create_blank_name(self):
        with pytest.raises(InvalidWorkerError):
            create_worker(worker_type='foreman', name=' ')

    def test_update_vehicle_number_rederives_last4(self, driver):
        update_worker(worker_id=driver.id, driver_info={'vehicle_number': '광주 99 나 0001'})

        driver.refresh_from_db()
        assert driver.driver_info['vehicle_number_last4'] == '0001'

    def test_update_ignores_other_type_info(self, foreman):
        update_worker(worker_id=foreman.id, driver_info={'vehicle_number': '1234'})

        foreman.refresh_from_db()
        assert foreman.driver_info == {}

    def test_update_missing(self):
        with pytest.raises(WorkerNotFoundError):
            update_worker(worker_id=uuid4(), name='누구')

    def test_delete(self, foreman):
        delete_worker(worker_id=foreman.id)
        assert not Worker.objects.filter(pk=foreman.pk).exists()


@pytest.mark.django_db
class TestWorkerSearch:

    def test_filter_by_type(self, foreman, driver):
        assert list(search_workers(worker_type='driver')) == [driver]

    def test_name_prefix(self, foreman, driver):
        assert list(search_workers(search_type='name', value='정')) == [foreman]

    def test_vehicle_last4(self, foreman, driver):
        assert list(search_workers(search_type='vehicle_number', value='3456')) == [driver]

    def test_vehicle_full_number(self, driver):
        assert list(search_workers(search_type='vehicle_number', value='전남 12 가 3456')) == [driver]

    def test_unknown_type(self):
        with pytest.raises(InvalidWorkerError):
            search_workers(worker_type='cook')

    def test_foremen_by_category(self, foreman, driver):
        assert get_foremen_by_category(category_id='cat-pulling') == [foreman]
        assert get_foremen_by_category(category_id='cat-packing') == []
