from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'workers'

router = DefaultRouter()
router.register(r'', views.WorkerViewSet, basename='worker')

urlpatterns = [
    # GET    /api/workers/?type=driver&search=1234&search_type=vehicle_number
    # GET    /api/workers/?category={category_id}
    path('', include(router.urls)),
]
