import pytest
from datetime import datetime
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.farmers.models import Farmer, Field
from apps.schedules.services import create_schedule
from apps.workers.services import create_worker


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        display_name='Farm Manager',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as the test user."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def foreman(db):
    return create_worker(
        worker_type='foreman',
        name='정반장',
        bank_info={'bank_name': '농협', 'account_number': '301-1234', 'account_holder': '정반장'},
    )


@pytest.fixture
def field(db):
    farmer = Farmer.objects.create(name='김철수', phone_number='010-1111-2222')
    return Field.objects.create(farmer=farmer, address={'full': '화원면 1-1'})


@pytest.fixture
def make_schedule(field, foreman):
    def make(day=20, work_type='packing'):
        return create_schedule(
            work_type=work_type,
            scheduled_start=timezone.make_aware(datetime(2026, 10, day, 7, 0)),
            actor_id='user-1',
            field_id=field.id,
            worker_id=foreman.id,
            base_rate=Decimal('500'),
            quantity=Decimal('100'),
            unit='망',
        )
    return make


@pytest.fixture
def s1(make_schedule):
    return make_schedule(day=20)


@pytest.fixture
def s2(make_schedule):
    return make_schedule(day=21, work_type='pulling')
