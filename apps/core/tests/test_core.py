import pytest
from decimal import Decimal
from uuid import uuid4
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.core.api import error_response
from apps.core.exceptions import (
    FarmServiceError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from apps.core.numbers import to_cents
from apps.core.store import get_or_not_found, translate_store_errors
from apps.farmers.models import Farmer


class TestTranslateStoreErrors:

    def test_database_error_becomes_store_error(self):
        @translate_store_errors
        def failing():
            raise DatabaseError('connection lost')

        with pytest.raises(StoreError) as exc_info:
            failing()
        assert isinstance(exc_info.value.__cause__, DatabaseError)

    def test_domain_errors_pass_through(self):
        @translate_store_errors
        def invalid():
            raise ValidationError('name is required')

        with pytest.raises(ValidationError):
            invalid()

    def test_return_value_kept(self):
        @translate_store_errors
        def ok():
            return 42

        assert ok() == 42


class TestErrorResponse:

    @pytest.mark.parametrize('error_class, expected', [
        (FarmServiceError, 400),
        (ValidationError, 400),
        (NotFoundError, 404),
        (InvalidTransitionError, 409),
        (StoreError, 503),
    ])
    def test_status_codes(self, error_class, expected):
        response = error_response(error_class('boom'))

        assert response.status_code == expected
        assert response.data == {'error': 'boom'}


@pytest.mark.django_db
class TestGetOrNotFound:

    def test_missing_row(self):
        with pytest.raises(NotFoundError, match='nope'):
            get_or_not_found(Farmer.objects, NotFoundError, 'nope', pk=uuid4())

    def test_malformed_id(self):
        with pytest.raises(NotFoundError):
            get_or_not_found(Farmer.objects, NotFoundError, 'nope', pk='not-a-uuid')

    def test_found(self):
        farmer = Farmer.objects.create(name='김철수', phone_number='010-1111-2222')
        assert get_or_not_found(Farmer.objects, NotFoundError, 'nope', pk=farmer.pk) == farmer


@pytest.mark.django_db
class TestHealthCheck:

    def test_healthy(self):
        response = APIClient().get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'healthy'


class TestToCents:

    def test_rounds_half_up(self):
        assert to_cents('0.005', ValidationError, 'amount') == Decimal('0.01')
        assert to_cents(12, ValidationError, 'amount') == Decimal('12.00')

    def test_sub_cent_rounds_to_zero(self):
        assert to_cents('0.004', ValidationError, 'amount') == Decimal('0.00')

    @pytest.mark.parametrize('value', ['NaN', 'sNaN', 'Infinity', '-Infinity', 'abc', None, '1e40'])
    def test_rejects_non_finite_and_garbage(self, value):
        with pytest.raises(ValidationError):
            to_cents(value, ValidationError, 'amount')
