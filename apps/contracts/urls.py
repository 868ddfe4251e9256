from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'contracts'

router = DefaultRouter()
router.register(r'', views.ContractViewSet, basename='contract')

urlpatterns = [
    # GET    /api/contracts/?farmer=&status=                 - List contracts
    # POST   /api/contracts/{id}/status/                     - Set contract status
    # POST   /api/contracts/{id}/lines/{line_id}/pay/        - Mark line paid
    # POST   /api/contracts/{id}/lines/{line_id}/schedule/   - Mark line scheduled
    # GET    /api/contracts/types/                           - Known contract types
    path('', include(router.urls)),
]
