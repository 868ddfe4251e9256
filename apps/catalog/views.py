from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.api import ErrorResponseSerializer, error_response
from apps.core.exceptions import FarmServiceError
from apps.core.identity import current_actor_id

from .models import Category, PaymentGroup, CropType, WorkType
from .serializers import (
    CategorySerializer,
    CategoryCreateSerializer,
    CategoryUpdateSerializer,
    SetNextCategorySerializer,
    MoveCategorySerializer,
    ReorderCategoriesSerializer,
    RateSerializer,
    RateCreateSerializer,
    RateUpdateSerializer,
    PaymentGroupSerializer,
    CropTypeSerializer,
    WorkTypeSerializer,
    LookupValueInputSerializer,
    LookupsSerializer,
)
from .services import (
    list_categories,
    get_category_by_id,
    create_category,
    update_category,
    set_next_category,
    delete_category,
    reorder_categories,
    move_category,
    get_chain_from,
    add_rate,
    update_rate,
    remove_rate,
    create_lookup_value,
    rename_lookup_value,
    delete_lookup_value,
    LookupCache,
)


class CategoryViewSet(viewsets.ModelViewSet):
    """
    ViewSet for work categories and their rates.

    list: All categories ordered by ``order``, then name
    create: Create a category at the end of the ordering
    retrieve: Get a category with its rates
    update/partial_update: Change name and/or description
    destroy: Unlink predecessors and delete the category
    """

    queryset = Category.objects.prefetch_related('rates').select_related('next_category')
    serializer_class = CategorySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return list_categories().select_related('next_category')

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'create':
            return CategoryCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return CategoryUpdateSerializer
        return CategorySerializer

    def _category_response(self, category_id, status_code=status.HTTP_200_OK):
        category = get_category_by_id(category_id=category_id)
        return Response(CategorySerializer(category).data, status=status_code)

    def create(self, request, *args, **kwargs):
        """Create a new category."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category = create_category(
                name=serializer.validated_data['name'],
                description=serializer.validated_data['description'],
                next_category_id=serializer.validated_data['next_category'],
                created_by=current_actor_id(request.user),
            )
        except FarmServiceError as e:
            return error_response(e)

        return self._category_response(category.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update name and/or description."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category = update_category(category_id=kwargs['pk'], **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return self._category_response(category.id)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Delete a category, clearing every pointer to it."""
        try:
            delete_category(category_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=SetNextCategorySerializer,
        responses={200: CategorySerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path='set-next')
    def set_next(self, request, pk=None):
        """Point this category at the next one in its pipeline (or clear it)."""
        serializer = SetNextCategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_next_category(
                category_id=pk,
                next_category_id=serializer.validated_data['next_category'],
            )
        except FarmServiceError as e:
            return error_response(e)

        return self._category_response(pk)

    @extend_schema(
        request=MoveCategorySerializer,
        responses={200: CategorySerializer(many=True), 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        """Swap the category with its neighbour; returns the new ordering."""
        serializer = MoveCategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            move_category(category_id=pk, direction=serializer.validated_data['direction'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(list_categories(), many=True).data)

    @extend_schema(
        request=ReorderCategoriesSerializer,
        responses={200: CategorySerializer(many=True), 404: ErrorResponseSerializer},
    )
    @action(detail=False, methods=['post'])
    def reorder(self, request):
        """Assign ``order`` following the submitted id list."""
        serializer = ReorderCategoriesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            reorder_categories(ordered_ids=serializer.validated_data['ordered_ids'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(list_categories(), many=True).data)

    @extend_schema(responses={200: CategorySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def chain(self, request, pk=None):
        """Categories reachable from this one by following ``next_category``."""
        try:
            get_category_by_id(category_id=pk)
        except FarmServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(list(get_chain_from(start_id=pk)), many=True).data)

    @extend_schema(
        request=RateCreateSerializer,
        responses={201: RateSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'])
    def rates(self, request, pk=None):
        """Add a rate to this category."""
        serializer = RateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            rate = add_rate(category_id=pk, **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(RateSerializer(rate).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=RateUpdateSerializer,
        responses={200: RateSerializer, 204: None, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['patch', 'delete'], url_path=r'rates/(?P<rate_id>[^/.]+)')
    def rate_detail(self, request, pk=None, rate_id=None):
        """Update (PATCH) or remove (DELETE) one rate of this category."""
        if request.method == 'DELETE':
            try:
                remove_rate(category_id=pk, rate_id=rate_id)
            except FarmServiceError as e:
                return error_response(e)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = RateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            rate = update_rate(category_id=pk, rate_id=rate_id, **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(RateSerializer(rate).data)


class LookupValueViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet for flat lookup values.

    Subclasses set ``model`` and ``serializer_class``.
    """

    model = None
    permission_classes = [IsAuthenticated]
    pagination_class = None
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return self.model.objects.all()

    def create(self, request, *args, **kwargs):
        serializer = LookupValueInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            value = create_lookup_value(
                model=self.model,
                name=serializer.validated_data['name'],
                created_by=current_actor_id(request.user),
            )
        except FarmServiceError as e:
            return error_response(e)

        return Response(self.get_serializer(value).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = LookupValueInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            value = rename_lookup_value(
                model=self.model,
                value_id=kwargs['pk'],
                name=serializer.validated_data['name'],
            )
        except FarmServiceError as e:
            return error_response(e)

        return Response(self.get_serializer(value).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_lookup_value(model=self.model, value_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)


class PaymentGroupViewSet(LookupValueViewSet):
    model = PaymentGroup
    queryset = PaymentGroup.objects.all()
    serializer_class = PaymentGroupSerializer


class CropTypeViewSet(LookupValueViewSet):
    model = CropType
    queryset = CropType.objects.all()
    serializer_class = CropTypeSerializer


class WorkTypeViewSet(LookupValueViewSet):
    model = WorkType
    queryset = WorkType.objects.all()
    serializer_class = WorkTypeSerializer


@extend_schema(
    responses={200: LookupsSerializer},
    description="All catalog lookups (categories with rates, payment groups, crop types, work types).",
    tags=['catalog'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lookups(request):
    """Return every lookup collection from a freshly loaded cache."""
    cache = LookupCache()
    serializer = LookupsSerializer({
        'categories': cache.categories,
        'payment_groups': cache.payment_groups,
        'crop_types': cache.crop_types,
        'work_types': cache.work_types,
    })
    return Response(serializer.data)
