from django.contrib import admin
from apps.farmers.models import Farmer, Field, FlagCounter


class FieldInline(admin.TabularInline):
    model = Field
    extra = 0
    fields = ['crop_type', 'area_value', 'area_unit', 'current_stage']
    readonly_fields = ['current_stage']


@admin.register(Farmer)
class FarmerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone_number', 'payment_group', 'subdistrict', 'created_at']
    list_filter = ['payment_group']
    search_fields = ['name', 'phone_number']
    readonly_fields = ['subdistrict', 'created_by', 'created_at', 'updated_at']
    inlines = [FieldInline]


@admin.register(Field)
class FieldAdmin(admin.ModelAdmin):
    list_display = ['farmer', 'crop_type', 'area_value', 'area_unit', 'current_stage', 'estimated_harvest_date']
    list_filter = ['crop_type', 'current_stage']
    search_fields = ['farmer__name', 'crop_type']
    readonly_fields = ['stage_history', 'created_at', 'updated_at']


@admin.register(FlagCounter)
class FlagCounterAdmin(admin.ModelAdmin):
    list_display = ['last_flag_number', 'updated_at']
    readonly_fields = ['updated_at']
