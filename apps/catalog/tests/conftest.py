import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.catalog.models import Category, Rate, PaymentGroup


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
def pulling_category(db):
    return Category.objects.create(name='뽑기', order=0)


@pytest.fixture
def packing_category(db):
    return Category.objects.create(name='포장', order=1)


@pytest.fixture
def start_category(db):
    return Category.objects.create(name='시작', order=2)


@pytest.fixture
def rate(packing_category):
    return Rate.objects.create(
        category=packing_category,
        name='망담기',
        default_price=Decimal('500'),
        unit='개',
    )


@pytest.fixture
def payment_group(db):
    return PaymentGroup.objects.create(name='A조')
