from django.contrib import admin
from apps.workers.models import Worker


@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'phone_number', 'created_at']
    list_filter = ['type']
    search_fields = ['name', 'phone_number']
    readonly_fields = ['created_at', 'updated_at']
