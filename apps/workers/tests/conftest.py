import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
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
        phone_number='010-1212-3434',
        foreman_info={'category_ids': ['cat-pulling']},
    )


@pytest.fixture
def driver(db):
    return create_worker(
        worker_type='driver',
        name='한기사',
        phone_number='010-5656-7878',
        driver_info={'vehicle_number': '전남 12 가 3456', 'vehicle_type': '5톤'},
    )
