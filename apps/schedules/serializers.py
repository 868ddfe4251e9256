from rest_framework import serializers

from .models import (
    AdditionalSettlement,
    Schedule,
    ScheduleWorkType,
    StageTransition,
    WorkStage,
)
from .services import allowed_next_stages, settlement_total


class StageTransitionSerializer(serializers.ModelSerializer):

    class Meta:
        model = StageTransition
        fields = ['stage', 'timestamp', 'by']
        read_only_fields = fields


class AdditionalSettlementSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)

    class Meta:
        model = AdditionalSettlement
        fields = ['id', 'amount', 'reason', 'date', 'category', 'category_name', 'created_at']
        read_only_fields = fields


class ScheduleSerializer(serializers.ModelSerializer):
    """Schedule with its stage history and settlement total."""

    farmer_name = serializers.CharField(source='farmer.name', read_only=True, default=None)
    worker_name = serializers.CharField(source='worker.name', read_only=True, default=None)
    stage_history = StageTransitionSerializer(many=True, read_only=True)
    additional_settlements = AdditionalSettlementSerializer(many=True, read_only=True)
    next_stages = serializers.SerializerMethodField()
    settlement_total = serializers.SerializerMethodField()

    class Meta:
        model = Schedule
        fields = [
            'id',
            'work_type',
            'farmer',
            'farmer_name',
            'field',
            'worker',
            'worker_name',
            'stage_current',
            'stage_history',
            'next_stages',
            'scheduled_start',
            'scheduled_end',
            'actual_start',
            'actual_end',
            'base_rate',
            'negotiated_rate',
            'quantity',
            'unit',
            'additional_amount',
            'additional_settlements',
            'settlement_total',
            'transport_info',
            'additional_info',
            'completion_details',
            'payment_status',
            'payment',
            'memo',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_next_stages(self, obj):
        return sorted(allowed_next_stages(obj.stage_current))

    def get_settlement_total(self, obj):
        return str(settlement_total(obj))


class ScheduleWriteSerializer(serializers.Serializer):
    """Input for creating or updating a schedule."""
    work_type = serializers.ChoiceField(choices=ScheduleWorkType.choices)
    farmer = serializers.UUIDField(required=False, allow_null=True)
    field = serializers.UUIDField(required=False, allow_null=True)
    worker = serializers.UUIDField(required=False, allow_null=True)
    scheduled_start = serializers.DateTimeField()
    scheduled_end = serializers.DateTimeField(required=False, allow_null=True)
    actual_start = serializers.DateTimeField(required=False, allow_null=True)
    actual_end = serializers.DateTimeField(required=False, allow_null=True)
    base_rate = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    negotiated_rate = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    unit = serializers.CharField(max_length=20, required=False, allow_blank=True)
    additional_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    transport_info = serializers.JSONField(required=False)
    additional_info = serializers.JSONField(required=False)
    memo = serializers.CharField(required=False, allow_blank=True)


class AdvanceStageSerializer(serializers.Serializer):
    stage = serializers.ChoiceField(choices=WorkStage.choices)


class CompletionDetailsSerializer(serializers.Serializer):
    """Measured results of a schedule; unknown keys are kept as type-specific details."""
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    unit = serializers.CharField(max_length=20)
    work_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    harvest_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    transport_fee = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    extra = serializers.DictField(required=False, default=dict)


class AdditionalSettlementWriteSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    date = serializers.DateField(required=False, allow_null=True)
    category = serializers.UUIDField(required=False, allow_null=True)
