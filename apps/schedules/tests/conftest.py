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
def farmer(db):
    return Farmer.objects.create(name='김철수', phone_number='010-1111-2222')


@pytest.fixture
def field(farmer):
    return Field.objects.create(farmer=farmer, address={'full': '화원면 1-1'}, crop_type='배추')


@pytest.fixture
def foreman(db):
    return create_worker(worker_type='foreman', name='정반장')


@pytest.fixture
def start_time():
    return timezone.make_aware(datetime(2026, 10, 20, 7, 0))


@pytest.fixture
def schedule(field, foreman, start_time):
    """A packing schedule at 500 per net, created by user-1."""
    return create_schedule(
        work_type='packing',
        scheduled_start=start_time,
        actor_id='user-1',
        field_id=field.id,
        worker_id=foreman.id,
        base_rate=Decimal('500'),
        unit='망',
    )
