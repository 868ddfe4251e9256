import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status

from apps.farmers.models import Farmer


@pytest.mark.django_db
class TestFarmerAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('farmers:farmer-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_farmer(self, authenticated_client, user):
        response = authenticated_client.post(
            reverse('farmers:farmer-list'),
            {
                'name': '최농부',
                'phone_number': '010-7777-8888',
                'address': {'full': '전남 해남군 화원면 9', 'subdistrict': '화원면'},
                'bank_info': {'bank_name': '농협', 'account_number': '123-45', 'account_holder': '최농부'},
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['subdistrict'] == '화원면'
        assert response.data['created_by'] == str(user.id)
        assert response.data['summary']['field_count'] == 0

    def test_create_farmer_missing_phone(self, authenticated_client):
        response = authenticated_client.post(
            reverse('farmers:farmer-list'), {'name': '최농부'}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search(self, authenticated_client, farmer, other_farmer):
        response = authenticated_client.get(
            reverse('farmers:farmer-list'), {'search': '박', 'search_type': 'name'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert [f['name'] for f in response.data['results']] == ['박영희']

    def test_search_unknown_type(self, authenticated_client, farmer):
        response = authenticated_client.get(
            reverse('farmers:farmer-list'), {'search': 'x', 'search_type': 'email'}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_partial_update(self, authenticated_client, farmer):
        response = authenticated_client.patch(
            reverse('farmers:farmer-detail', args=[farmer.id]),
            {'memo': '오전 연락'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['memo'] == '오전 연락'
        assert response.data['name'] == farmer.name

    def test_farmer_fields(self, authenticated_client, farmer, field):
        response = authenticated_client.get(reverse('farmers:farmer-fields', args=[farmer.id]))

        assert response.status_code == status.HTTP_200_OK
        assert [f['id'] for f in response.data] == [str(field.id)]

    def test_delete(self, authenticated_client, farmer):
        response = authenticated_client.delete(reverse('farmers:farmer-detail', args=[farmer.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Farmer.objects.filter(pk=farmer.pk).exists()

    def test_delete_missing(self, authenticated_client):
        response = authenticated_client.delete(reverse('farmers:farmer-detail', args=[uuid4()]))
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestFieldAPI:

    def test_create_field(self, authenticated_client, farmer):
        response = authenticated_client.post(
            reverse('farmers:field-list'),
            {
                'farmer': str(farmer.id),
                'address': {'full': '화원면 1-5'},
                'area_value': '900',
                'crop_type': '배추',
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['farmer_name'] == farmer.name
        assert len(response.data['locations']) == 1

    def test_create_field_without_farmer(self, authenticated_client):
        response = authenticated_client.post(
            reverse('farmers:field-list'), {'crop_type': '배추'}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_by_crop_type(self, authenticated_client, field):
        response = authenticated_client.get(reverse('farmers:field-list'), {'crop_type': '무'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_stage(self, authenticated_client, field, user):
        response = authenticated_client.post(
            reverse('farmers:field-stage', args=[field.id]), {'stage': '수확중'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['current_stage'] == '수확중'
        assert response.data['stage_history'][-1]['by'] == str(user.id)
