from rest_framework import serializers

from .models import Contract, ContractStatus, PaymentLine
from .services import (
    ordered_lines,
    compute_paid_to_date,
    compute_outstanding,
    lines_settled,
    next_due_payment,
)


class PaymentLineSerializer(serializers.ModelSerializer):
    """Serializer for contract payment lines."""

    class Meta:
        model = PaymentLine
        fields = [
            'id',
            'kind',
            'installment_number',
            'amount',
            'due_date',
            'status',
            'paid_date',
            'paid_amount',
            'receipt_ref',
        ]
        read_only_fields = fields


class ContractSerializer(serializers.ModelSerializer):
    """Contract with its ledger figures."""

    farmer_name = serializers.CharField(source='farmer.name', read_only=True, default=None)
    payment_lines = serializers.SerializerMethodField()
    paid_to_date = serializers.SerializerMethodField()
    outstanding = serializers.SerializerMethodField()
    lines_settled = serializers.SerializerMethodField()
    next_due_payment = serializers.SerializerMethodField()

    class Meta:
        model = Contract
        fields = [
            'id',
            'farmer',
            'farmer_name',
            'fields',
            'contract_number',
            'contract_date',
            'contract_type',
            'status',
            'total_amount',
            'payment_lines',
            'paid_to_date',
            'outstanding',
            'lines_settled',
            'next_due_payment',
            'details',
            'memo',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_payment_lines(self, obj):
        return PaymentLineSerializer(ordered_lines(obj), many=True).data

    def get_paid_to_date(self, obj):
        return str(compute_paid_to_date(obj))

    def get_outstanding(self, obj):
        return str(compute_outstanding(obj))

    def get_lines_settled(self, obj):
        return lines_settled(obj)

    def get_next_due_payment(self, obj):
        line = next_due_payment(obj)
        return PaymentLineSerializer(line).data if line else None


class PlannedLineSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    due_date = serializers.DateField(required=False, allow_null=True)


class PlannedInstallmentSerializer(PlannedLineSerializer):
    installment_number = serializers.IntegerField(min_value=1, required=False)


class ContractCreateSerializer(serializers.Serializer):
    """Input for creating a contract."""
    farmer = serializers.UUIDField()
    field_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    contract_number = serializers.CharField(max_length=50, allow_blank=True)
    contract_date = serializers.DateField()
    contract_type = serializers.CharField(max_length=50, required=False, default='일반')
    status = serializers.ChoiceField(choices=ContractStatus.choices, required=False, default=ContractStatus.PENDING)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    down_payment = PlannedLineSerializer()
    intermediate_payments = PlannedInstallmentSerializer(many=True, required=False, default=list)
    final_payment = PlannedLineSerializer()
    details = serializers.JSONField(required=False, default=dict)
    memo = serializers.CharField(required=False, allow_blank=True, default='')


class ContractUpdateSerializer(serializers.Serializer):
    """Input for updating contract terms."""
    field_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    contract_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    contract_date = serializers.DateField(required=False)
    contract_type = serializers.CharField(max_length=50, required=False)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    down_payment = PlannedLineSerializer(required=False)
    intermediate_payments = PlannedInstallmentSerializer(many=True, required=False)
    final_payment = PlannedLineSerializer(required=False)
    details = serializers.JSONField(required=False)
    memo = serializers.CharField(required=False, allow_blank=True)


class ContractStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ContractStatus.choices)


class MarkLinePaidSerializer(serializers.Serializer):
    paid_date = serializers.DateField(required=False, allow_null=True)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    receipt_ref = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
