from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # GET    /api/payments/?receiver=&status=&date_from=&date_to=
    # POST   /api/payments/                 - Create settlement
    # PATCH  /api/payments/{id}/            - Edit fields and settled schedules
    # POST   /api/payments/{id}/status/     - Change status
    # DELETE /api/payments/{id}/            - Delete, releasing schedules
    path('', include(router.urls)),
]
