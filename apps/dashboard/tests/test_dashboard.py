import pytest
from datetime import date
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.dashboard.queries import DashboardQueries


@pytest.mark.django_db
class TestDashboardQueries:

    def test_empty_database(self):
        overview = DashboardQueries.overview(today=date(2026, 10, 20))

        assert overview['farmers'] == 0
        assert overview['workers'] == {'total': 0, 'by_type': {'foreman': 0, 'driver': 0}}
        assert overview['contracts']['total_amount'] == Decimal('0')
        assert overview['schedules']['by_stage']['예정'] == 0
        assert overview['payments']['paid_amount'] == Decimal('0')

    def test_counts(self, populated):
        overview = DashboardQueries.overview(today=date(2026, 10, 20))

        assert overview['farmers'] == 2
        assert overview['fields'] == 1
        assert overview['workers']['by_type'] == {'foreman': 1, 'driver': 1}
        assert overview['contracts']['by_status']['active'] == 1
        assert overview['contracts']['by_status']['cancelled'] == 1
        assert overview['contracts']['total_amount'] == Decimal('1000000')
        assert overview['schedules']['total'] == 2
        assert overview['schedules']['today'] == 2
        assert overview['payments']['by_status']['completed'] == 1
        assert overview['payments']['paid_amount'] == Decimal('50000')

    def test_overdue_lines_skip_cancelled_contracts(self, populated):
        assert DashboardQueries.overdue_payment_lines(today=date(2026, 10, 20)) == 1
        assert DashboardQueries.overdue_payment_lines(today=date(2026, 2, 1)) == 0


@pytest.mark.django_db
class TestDashboardAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('dashboard:dashboard'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_overview(self, authenticated_client, populated):
        response = authenticated_client.get(reverse('dashboard:dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['farmers'] == 2
        assert response.data['workers']['total'] == 2
        assert response.data['schedules']['by_stage']['예정'] == 2
        assert response.data['payments']['paid_amount'] == '50000.00'
