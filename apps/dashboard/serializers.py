from rest_framework import serializers


class CountsByKeySerializer(serializers.Serializer):
    total = serializers.IntegerField()


class WorkerCountsSerializer(CountsByKeySerializer):
    by_type = serializers.DictField(child=serializers.IntegerField())


class ContractCountsSerializer(CountsByKeySerializer):
    by_status = serializers.DictField(child=serializers.IntegerField())
    total_amount = serializers.DecimalField(max_digits=16, decimal_places=2)


class ScheduleCountsSerializer(CountsByKeySerializer):
    by_stage = serializers.DictField(child=serializers.IntegerField())
    today = serializers.IntegerField()


class PaymentCountsSerializer(CountsByKeySerializer):
    by_status = serializers.DictField(child=serializers.IntegerField())
    paid_amount = serializers.DecimalField(max_digits=16, decimal_places=2)


class DashboardResponseSerializer(serializers.Serializer):
    """Response serializer for the dashboard overview."""
    farmers = serializers.IntegerField()
    fields = serializers.IntegerField()
    workers = WorkerCountsSerializer()
    contracts = ContractCountsSerializer()
    schedules = ScheduleCountsSerializer()
    payments = PaymentCountsSerializer()
    overdue_payment_lines = serializers.IntegerField()
