from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'schedules'

router = DefaultRouter()
router.register(r'', views.ScheduleViewSet, basename='schedule')

urlpatterns = [
    # GET    /api/schedules/?farmer=&field=&worker=&work_type=&stage=&payment_status=
    # POST   /api/schedules/{id}/advance/                  - Move to next stage
    # POST   /api/schedules/{id}/completion/               - Record completion details
    # POST   /api/schedules/{id}/additional-settlements/   - Add additional settlement
    path('', include(router.urls)),
]
