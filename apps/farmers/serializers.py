from rest_framework import serializers

from apps.core.serializers import AddressSerializer, BankInfoSerializer

from .models import Farmer, Field
from .services import get_farmer_summary


class StageHistoryEntrySerializer(serializers.Serializer):
    stage = serializers.CharField()
    timestamp = serializers.CharField()
    by = serializers.CharField()


class LocationSerializer(serializers.Serializer):
    """One flag-numbered sub-plot of a field."""
    id = serializers.CharField(required=False)
    address = AddressSerializer()
    flag_number = serializers.IntegerField(min_value=0, required=False)
    area = serializers.DictField(required=False)
    crop_type = serializers.CharField(required=False, allow_blank=True)
    note = serializers.CharField(required=False, allow_blank=True)


class FieldSerializer(serializers.ModelSerializer):
    """Main serializer for fields."""

    farmer_name = serializers.CharField(source='farmer.name', read_only=True)
    stage_history = StageHistoryEntrySerializer(many=True, read_only=True)

    class Meta:
        model = Field
        fields = [
            'id',
            'farmer',
            'farmer_name',
            'address',
            'area_value',
            'area_unit',
            'crop_type',
            'estimated_harvest_date',
            'current_stage',
            'stage_updated_at',
            'stage_history',
            'locations',
            'memo',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class FieldWriteSerializer(serializers.Serializer):
    """Input for creating or updating a field."""
    farmer = serializers.UUIDField(required=False)
    address = AddressSerializer(required=False)
    area_value = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    area_unit = serializers.CharField(max_length=10, required=False)
    crop_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    estimated_harvest_date = serializers.DateField(required=False, allow_null=True)
    locations = LocationSerializer(many=True, required=False)
    memo = serializers.CharField(required=False, allow_blank=True)


class FieldStageSerializer(serializers.Serializer):
    stage = serializers.CharField(max_length=50)


class FarmerSerializer(serializers.ModelSerializer):
    """Farmer with derived field and contract figures."""

    summary = serializers.SerializerMethodField()

    class Meta:
        model = Farmer
        fields = [
            'id',
            'name',
            'phone_number',
            'payment_group',
            'personal_id',
            'address',
            'subdistrict',
            'bank_info',
            'memo',
            'summary',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_summary(self, obj):
        summary = get_farmer_summary(obj)
        return {
            'field_count': summary['field_count'],
            'active_contracts': summary['active_contracts'],
            'total_contract_amount': str(summary['total_contract_amount']),
            'remaining_amount': str(summary['remaining_amount']),
        }


class FarmerWriteSerializer(serializers.Serializer):
    """Input for creating or updating a farmer."""
    name = serializers.CharField(max_length=100)
    phone_number = serializers.CharField(max_length=20)
    payment_group = serializers.CharField(max_length=100, required=False, allow_blank=True)
    personal_id = serializers.CharField(max_length=20, required=False, allow_blank=True)
    address = AddressSerializer(required=False)
    bank_info = BankInfoSerializer(required=False)
    memo = serializers.CharField(required=False, allow_blank=True)
