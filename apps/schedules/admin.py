from django.contrib import admin
from apps.schedules.models import Schedule, StageTransition, AdditionalSettlement


class StageTransitionInline(admin.TabularInline):
    model = StageTransition
    extra = 0
    can_delete = False
    readonly_fields = ['stage', 'timestamp', 'by']


class AdditionalSettlementInline(admin.TabularInline):
    model = AdditionalSettlement
    extra = 0
    fields = ['amount', 'reason', 'date', 'category']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ['work_type', 'farmer', 'worker', 'stage_current', 'scheduled_start', 'payment_status']
    list_filter = ['work_type', 'stage_current', 'payment_status']
    search_fields = ['farmer__name', 'worker__name', 'memo']
    # Stage changes go through the stage machine only
    readonly_fields = ['stage_current', 'completion_details', 'payment', 'created_at', 'updated_at']
    inlines = [StageTransitionInline, AdditionalSettlementInline]
    date_hierarchy = 'scheduled_start'
