from rest_framework import serializers

from apps.core.serializers import AddressSerializer, BankInfoSerializer

from .models import Worker, WorkerType


class ForemanRateSerializer(serializers.Serializer):
    """A catalog rate copied onto a foreman."""
    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True)
    default_price = serializers.FloatField(min_value=0)
    unit = serializers.CharField(allow_blank=True)
    category_id = serializers.CharField(required=False)
    category_name = serializers.CharField(required=False, allow_blank=True)


class ForemanInfoSerializer(serializers.Serializer):
    category_ids = serializers.ListField(child=serializers.CharField(), required=False)
    rates = ForemanRateSerializer(many=True, required=False)


class DriverRatesSerializer(serializers.Serializer):
    base_rate = serializers.FloatField(min_value=0, required=False)
    distance_rate = serializers.FloatField(min_value=0, required=False)


class DriverInfoSerializer(serializers.Serializer):
    vehicle_number = serializers.CharField(allow_blank=True)
    vehicle_type = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    rates = DriverRatesSerializer(required=False)


class WorkerSerializer(serializers.ModelSerializer):
    """Main serializer for workers."""

    class Meta:
        model = Worker
        fields = [
            'id',
            'type',
            'name',
            'phone_number',
            'personal_id',
            'address',
            'bank_info',
            'foreman_info',
            'driver_info',
            'memo',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class WorkerWriteSerializer(serializers.Serializer):
    """Input for creating or updating a worker."""
    type = serializers.ChoiceField(choices=WorkerType.choices, required=False)
    name = serializers.CharField(max_length=100)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    personal_id = serializers.CharField(max_length=20, required=False, allow_blank=True)
    address = AddressSerializer(required=False)
    bank_info = BankInfoSerializer(required=False)
    foreman_info = ForemanInfoSerializer(required=False)
    driver_info = DriverInfoSerializer(required=False)
    memo = serializers.CharField(required=False, allow_blank=True)
