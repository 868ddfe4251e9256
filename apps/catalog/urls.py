from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'categories', views.CategoryViewSet, basename='category')
router.register(r'payment-groups', views.PaymentGroupViewSet, basename='payment-group')
router.register(r'crop-types', views.CropTypeViewSet, basename='crop-type')
router.register(r'work-types', views.WorkTypeViewSet, basename='work-type')

urlpatterns = [
    # GET    /api/catalog/categories/                         - List categories
    # POST   /api/catalog/categories/                         - Create category
    # PATCH  /api/catalog/categories/{id}/                    - Update name/description
    # DELETE /api/catalog/categories/{id}/                    - Delete (unlinks predecessors)
    # POST   /api/catalog/categories/{id}/set-next/           - Set or clear next category
    # POST   /api/catalog/categories/{id}/move/               - Move up/down
    # POST   /api/catalog/categories/reorder/                 - Reorder by id list
    # GET    /api/catalog/categories/{id}/chain/              - Follow next_category pointers
    # POST   /api/catalog/categories/{id}/rates/              - Add rate
    # PATCH  /api/catalog/categories/{id}/rates/{rate_id}/    - Update rate
    # DELETE /api/catalog/categories/{id}/rates/{rate_id}/    - Remove rate
    path('lookups/', views.lookups, name='lookups'),

    path('', include(router.urls)),
]
