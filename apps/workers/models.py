from django.db import models
import uuid


class WorkerType(models.TextChoices):
    FOREMAN = 'foreman', 'Foreman'
    DRIVER = 'driver', 'Driver'


class Worker(models.Model):
    """
    A foreman or a driver who gets paid through settlements.

    Type-specific data lives in ``foreman_info`` (category ids and rates) or
    ``driver_info`` (vehicle, driver category and transport rates).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type = models.CharField(max_length=10, choices=WorkerType.choices, db_index=True)
    name = models.CharField(max_length=100, db_index=True)
    phone_number = models.CharField(max_length=20, blank=True, db_index=True)
    personal_id = models.CharField(max_length=20, blank=True)

    address = models.JSONField(default=dict, blank=True)
    bank_info = models.JSONField(default=dict, blank=True)
    foreman_info = models.JSONField(default=dict, blank=True)
    driver_info = models.JSONField(default=dict, blank=True)

    memo = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'workers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['type', 'name']),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"
