import pytest
from datetime import date, datetime
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.contracts.services import create_contract
from apps.farmers.models import Farmer, Field
from apps.payments.services import create_payment
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
def populated(db):
    """Two farmers, one field, a foreman and a driver, two contracts, two schedules, one payment."""
    farmer = Farmer.objects.create(name='김철수', phone_number='010-1111-2222')
    Farmer.objects.create(name='박영희', phone_number='010-3333-4444')
    field = Field.objects.create(farmer=farmer, address={'full': '화원면 1-1'})
    foreman = create_worker(worker_type='foreman', name='정반장')
    create_worker(worker_type='driver', name='한기사', driver_info={'vehicle_number': '12가3456'})

    create_contract(
        farmer_id=farmer.id,
        contract_number='D-1',
        contract_date=date(2026, 3, 1),
        total_amount=Decimal('1000000'),
        down_payment={'amount': Decimal('300000'), 'due_date': date(2026, 3, 1)},
        final_payment={'amount': Decimal('700000'), 'due_date': date(2026, 12, 1)},
        status='active',
    )
    create_contract(
        farmer_id=farmer.id,
        contract_number='D-2',
        contract_date=date(2026, 3, 2),
        total_amount=Decimal('500000'),
        down_payment={'amount': Decimal('0'), 'due_date': date(2026, 3, 1)},
        final_payment={'amount': Decimal('500000')},
        status='cancelled',
    )

    start = timezone.make_aware(datetime(2026, 10, 20, 7, 0))
    packing = create_schedule(
        work_type='packing', scheduled_start=start, actor_id='user-1',
        field_id=field.id, worker_id=foreman.id,
    )
    create_schedule(work_type='pulling', scheduled_start=start, actor_id='user-1', field_id=field.id)
    create_payment(
        receiver_id=foreman.id,
        schedule_ids=[packing.id],
        amount=Decimal('50000'),
        status='completed',
    )
