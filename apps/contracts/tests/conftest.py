import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.contracts.models import PaymentLineStatus
from apps.contracts.services import create_contract
from apps.farmers.models import Farmer, Field


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
def contract(farmer, field):
    """1,000,000 contract: 300,000 down, one 400,000 installment, 300,000 final."""
    return create_contract(
        farmer_id=farmer.id,
        contract_number='2026-001',
        contract_date=date(2026, 3, 1),
        total_amount=Decimal('1000000'),
        down_payment={'amount': Decimal('300000'), 'due_date': date(2026, 3, 1)},
        intermediate_payments=[{'amount': Decimal('400000'), 'due_date': date(2026, 5, 1)}],
        final_payment={'amount': Decimal('300000'), 'due_date': date(2026, 7, 1)},
        field_ids=[field.id],
        created_by='user-1',
    )


@pytest.fixture
def line_of(contract):
    """Look up a payment line of ``contract`` by kind."""
    def get(kind):
        return contract.payment_lines.get(kind=kind)
    return get


@pytest.fixture
def set_line_status():
    def set_status(line, status=PaymentLineStatus.PAID):
        line.status = status
        line.save(update_fields=['status'])
        return line
    return set_status
