from rest_framework import serializers

from apps.core.serializers import BankInfoSerializer

from .models import Payment, PaymentMethod, PaymentStatus, SettlementItem


class SettlementItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = SettlementItem
        fields = ['schedule', 'schedule_type', 'schedule_date', 'description']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Settlement payment with the schedules it covers."""

    items = SettlementItemSerializer(many=True, read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'receiver',
            'receiver_name',
            'receiver_type',
            'payer_id',
            'amount',
            'method',
            'status',
            'bank_info',
            'payment_date',
            'receipt_ref',
            'items',
            'memo',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """Input for creating a settlement payment."""
    receiver = serializers.UUIDField()
    schedule_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_date = serializers.DateField(required=False, allow_null=True)
    method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, default=PaymentMethod.BANK)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False, default=PaymentStatus.PENDING)
    bank_info = BankInfoSerializer(required=False, allow_null=True)
    receipt_ref = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    memo = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PaymentStatus.choices)


class PaymentUpdateSerializer(serializers.Serializer):
    """Input for editing a payment; omitted fields are left unchanged."""
    schedule_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    payment_date = serializers.DateField(required=False)
    method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    bank_info = BankInfoSerializer(required=False)
    receipt_ref = serializers.CharField(max_length=255, required=False, allow_blank=True)
    memo = serializers.CharField(required=False, allow_blank=True)
