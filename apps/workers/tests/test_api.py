import pytest
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
class TestWorkerAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('workers:worker-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_driver(self, authenticated_client):
        response = authenticated_client.post(
            reverse('workers:worker-list'),
            {
                'type': 'driver',
                'name': '오기사',
                'driver_info': {
                    'vehicle_number': '전남 34 다 7890',
                    'rates': {'base_rate': 50000, 'distance_rate': 1200},
                },
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['driver_info']['vehicle_number_last4'] == '7890'
        assert response.data['driver_info']['rates']['base_rate'] == 50000

    def test_create_without_type(self, authenticated_client):
        response = authenticated_client.post(
            reverse('workers:worker-list'), {'name': '오기사'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_list_by_type(self, authenticated_client, foreman, driver):
        response = authenticated_client.get(reverse('workers:worker-list'), {'type': 'foreman'})

        assert response.status_code == status.HTTP_200_OK
        assert [w['name'] for w in response.data['results']] == ['정반장']

    def test_search_vehicle(self, authenticated_client, foreman, driver):
        response = authenticated_client.get(
            reverse('workers:worker-list'),
            {'search': '3456', 'search_type': 'vehicle_number'},
        )

        assert [w['id'] for w in response.data['results']] == [str(driver.id)]

    def test_list_by_category(self, authenticated_client, foreman, driver):
        response = authenticated_client.get(reverse('workers:worker-list'), {'category': 'cat-pulling'})

        assert response.status_code == status.HTTP_200_OK
        assert [w['name'] for w in response.data] == ['정반장']

    def test_partial_update(self, authenticated_client, foreman):
        response = authenticated_client.patch(
            reverse('workers:worker-detail', args=[foreman.id]),
            {'phone_number': '010-0000-1111'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['phone_number'] == '010-0000-1111'
