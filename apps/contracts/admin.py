from django.contrib import admin
from apps.contracts.models import Contract, PaymentLine


class PaymentLineInline(admin.TabularInline):
    """Inline admin for the installment ledger."""
    model = PaymentLine
    extra = 0
    fields = ['kind', 'installment_number', 'amount', 'due_date', 'status', 'paid_date', 'paid_amount']


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ['contract_number', 'farmer', 'contract_date', 'contract_type', 'status', 'total_amount']
    list_filter = ['status', 'contract_type']
    search_fields = ['contract_number', 'farmer__name']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    filter_horizontal = ['fields']
    inlines = [PaymentLineInline]
    date_hierarchy = 'contract_date'
