from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.api import StandardPagination, error_response
from apps.core.exceptions import FarmServiceError

from .models import Worker
from .serializers import WorkerSerializer, WorkerWriteSerializer
from .services import (
    search_workers,
    get_foremen_by_category,
    create_worker,
    update_worker,
    delete_worker,
    InvalidWorkerError,
)


class WorkerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for foremen and drivers.

    list: Filter by ``type``, search by name/phone/vehicle number, or list
          foremen working a ``category``
    create: Register a foreman or driver (``type`` required)
    """

    queryset = Worker.objects.all()
    serializer_class = WorkerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return WorkerWriteSerializer
        return WorkerSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('type', OpenApiTypes.STR, description='foreman or driver'),
            OpenApiParameter('search', OpenApiTypes.STR, description='Search value'),
            OpenApiParameter(
                'search_type', OpenApiTypes.STR,
                description='name (prefix), phone_number or vehicle_number',
                default='name',
            ),
            OpenApiParameter('category', OpenApiTypes.UUID, description='Foremen working this category'),
        ],
    )
    def list(self, request, *args, **kwargs):
        category_id = request.query_params.get('category')
        if category_id:
            workers = get_foremen_by_category(category_id=category_id)
            return Response(WorkerSerializer(workers, many=True).data)

        try:
            queryset = search_workers(
                worker_type=request.query_params.get('type'),
                search_type=request.query_params.get('search_type'),
                value=request.query_params.get('search'),
            )
        except FarmServiceError as e:
            return error_response(e)

        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(WorkerSerializer(page, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        worker_type = data.pop('type', None)
        if not worker_type:
            return error_response(InvalidWorkerError("type is required"))

        try:
            worker = create_worker(worker_type=worker_type, **data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(WorkerSerializer(worker).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.pop('type', None)

        try:
            worker = update_worker(worker_id=kwargs['pk'], **data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(WorkerSerializer(worker).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_worker(worker_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)
