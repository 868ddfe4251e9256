from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'farmers'

router = DefaultRouter()
router.register(r'farmers', views.FarmerViewSet, basename='farmer')
router.register(r'fields', views.FieldViewSet, basename='field')

urlpatterns = [
    # GET    /api/farmers/?search=&search_type=   - Search farmers
    # GET    /api/farmers/{id}/fields/            - Farmer's fields
    # GET    /api/fields/?farmer=&crop_type=      - Filter fields
    # POST   /api/fields/{id}/stage/              - Append field stage
    path('', include(router.urls)),
]
