from django.contrib import admin
from apps.payments.models import Payment, SettlementItem


class SettlementItemInline(admin.TabularInline):
    model = SettlementItem
    extra = 0
    readonly_fields = ['schedule', 'schedule_type', 'schedule_date', 'description']
    can_delete = False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['receiver_name', 'receiver_type', 'amount', 'method', 'status', 'payment_date']
    list_filter = ['status', 'method', 'receiver_type']
    search_fields = ['receiver_name', 'receipt_ref', 'memo']
    readonly_fields = ['receiver_name', 'receiver_type', 'payer_id', 'created_at', 'updated_at']
    inlines = [SettlementItemInline]
    date_hierarchy = 'payment_date'
