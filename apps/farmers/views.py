from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.api import ErrorResponseSerializer, StandardPagination, error_response
from apps.core.exceptions import FarmServiceError
from apps.core.identity import current_actor_id

from .models import Farmer, Field
from .serializers import (
    FarmerSerializer,
    FarmerWriteSerializer,
    FieldSerializer,
    FieldWriteSerializer,
    FieldStageSerializer,
)
from .services import (
    search_farmers,
    get_farmer_by_id,
    create_farmer,
    update_farmer,
    delete_farmer,
    list_fields,
    get_field_by_id,
    create_field,
    update_field,
    delete_field,
    update_field_stage,
    InvalidFieldError,
)


class FarmerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for farmers.

    list: Farmers ordered by name, optionally searched
    create: Register a farmer
    retrieve: Farmer with derived contract figures
    update/partial_update: Merge changes
    destroy: Delete the farmer and their fields
    """

    queryset = Farmer.objects.all()
    serializer_class = FarmerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return FarmerWriteSerializer
        return FarmerSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('search', OpenApiTypes.STR, description='Search value'),
            OpenApiParameter(
                'search_type', OpenApiTypes.STR,
                description='name (prefix), phone_number, subdistrict or payment_group',
                default='name',
            ),
        ],
    )
    def list(self, request, *args, **kwargs):
        try:
            queryset = search_farmers(
                search_type=request.query_params.get('search_type'),
                value=request.query_params.get('search'),
            )
        except FarmServiceError as e:
            return error_response(e)

        page = self.paginate_queryset(queryset)
        serializer = FarmerSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Register a new farmer."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            farmer = create_farmer(
                created_by=current_actor_id(request.user),
                **serializer.validated_data
            )
        except FarmServiceError as e:
            return error_response(e)

        return Response(FarmerSerializer(farmer).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            farmer = update_farmer(farmer_id=kwargs['pk'], **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(FarmerSerializer(farmer).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_farmer(farmer_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: FieldSerializer(many=True), 404: ErrorResponseSerializer})
    @action(detail=True, methods=['get'])
    def fields(self, request, pk=None):
        """Fields owned by this farmer."""
        try:
            farmer = get_farmer_by_id(farmer_id=pk)
        except FarmServiceError as e:
            return error_response(e)

        return Response(FieldSerializer(list_fields(farmer_id=farmer.id), many=True).data)


class FieldViewSet(viewsets.ModelViewSet):
    """
    ViewSet for fields.

    list: Fields, filterable by ``farmer`` and ``crop_type``
    stage: Append a stage to the field's history
    """

    queryset = Field.objects.select_related('farmer')
    serializer_class = FieldSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        return list_fields(
            farmer_id=self.request.query_params.get('farmer'),
            crop_type=self.request.query_params.get('crop_type'),
        )

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return FieldWriteSerializer
        return FieldSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        farmer_id = data.pop('farmer', None)
        if not farmer_id:
            return error_response(InvalidFieldError("farmer is required"))

        try:
            field = create_field(farmer_id=farmer_id, **data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(FieldSerializer(field).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.pop('farmer', None)

        try:
            field = update_field(field_id=kwargs['pk'], **data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(FieldSerializer(field).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_field(field_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=FieldStageSerializer,
        responses={200: FieldSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'])
    def stage(self, request, pk=None):
        """Move the field to a new stage."""
        serializer = FieldStageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            field = update_field_stage(
                field_id=pk,
                stage=serializer.validated_data['stage'],
                actor_id=current_actor_id(request.user),
            )
        except FarmServiceError as e:
            return error_response(e)

        return Response(FieldSerializer(get_field_by_id(field_id=field.id)).data)
