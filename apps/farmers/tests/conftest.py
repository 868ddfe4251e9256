import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
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
    return Farmer.objects.create(
        name='김철수',
        phone_number='010-1111-2222',
        payment_group='A조',
        address={'full': '전남 해남군 화원면 1', 'subdistrict': '화원면'},
    )


@pytest.fixture
def other_farmer(db):
    return Farmer.objects.create(
        name='박영희',
        phone_number='010-3333-4444',
        payment_group='B조',
        address={'full': '전남 해남군 산이면 2', 'subdistrict': '산이면'},
    )


@pytest.fixture
def field(farmer):
    return Field.objects.create(
        farmer=farmer,
        address={'full': '전남 해남군 화원면 1-1', 'subdistrict': '화원면'},
        area_value=Decimal('1200'),
        crop_type='배추',
    )


@pytest.fixture
def contract_factory(farmer):
    """Create contracts for ``farmer`` with a down and a final payment line."""
    from apps.contracts.services import create_contract

    counter = {'n': 0}

    def make(total_amount, status='pending', down=0, final=0):
        counter['n'] += 1
        return create_contract(
            farmer_id=farmer.id,
            contract_number=f'C-{counter["n"]:03d}',
            contract_date=date(2026, 3, 1),
            total_amount=Decimal(total_amount),
            down_payment={'amount': Decimal(down)},
            final_payment={'amount': Decimal(final)},
            status=status,
        )

    return make
