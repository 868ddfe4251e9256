from django.contrib import admin
from apps.catalog.models import Category, Rate, PaymentGroup, CropType, WorkType


class RateInline(admin.TabularInline):
    """Inline admin for category rates."""
    model = Rate
    extra = 0
    fields = ['name', 'default_price', 'unit', 'position']


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'order', 'next_category', 'created_at']
    search_fields = ['name', 'description']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    inlines = [RateInline]
    ordering = ['order', 'name']


@admin.register(PaymentGroup, CropType, WorkType)
class LookupValueAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_by', 'created_at']
    search_fields = ['name']
    ordering = ['name']
