from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.api import ErrorResponseSerializer, StandardPagination, error_response
from apps.core.exceptions import FarmServiceError
from apps.core.identity import current_actor_id

from .models import Schedule
from .serializers import (
    ScheduleSerializer,
    ScheduleWriteSerializer,
    AdvanceStageSerializer,
    CompletionDetailsSerializer,
    AdditionalSettlementSerializer,
    AdditionalSettlementWriteSerializer,
)
from .services import (
    list_schedules,
    get_schedule_by_id,
    create_schedule,
    update_schedule,
    delete_schedule,
    advance_stage,
    record_completion_details,
    add_additional_settlement,
)


class ScheduleViewSet(viewsets.ModelViewSet):
    """
    ViewSet for work schedules.

    list: Schedules filtered by farmer, field, worker, work_type, stage, payment_status
    create: Create a schedule in stage 예정
    advance: Move the schedule to its next stage
    completion: Record measured quantities
    additional_settlements: Append an extra settlement amount
    """

    queryset = Schedule.objects.all()
    serializer_class = ScheduleSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        params = self.request.query_params
        return list_schedules(
            farmer_id=params.get('farmer'),
            field_id=params.get('field'),
            worker_id=params.get('worker'),
            work_type=params.get('work_type'),
            stage=params.get('stage'),
            payment_status=params.get('payment_status'),
        )

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return ScheduleWriteSerializer
        return ScheduleSerializer

    def _schedule_response(self, schedule_id, status_code=status.HTTP_200_OK):
        schedule = get_schedule_by_id(schedule_id=schedule_id)
        return Response(ScheduleSerializer(schedule).data, status=status_code)

    @staticmethod
    def _references(data):
        return {
            'farmer_id': data.pop('farmer', None),
            'field_id': data.pop('field', None),
            'worker_id': data.pop('worker', None),
        }

    @extend_schema(
        parameters=[
            OpenApiParameter('farmer', OpenApiTypes.UUID, description='Filter by farmer'),
            OpenApiParameter('field', OpenApiTypes.UUID, description='Filter by field'),
            OpenApiParameter('worker', OpenApiTypes.UUID, description='Filter by worker'),
            OpenApiParameter('work_type', OpenApiTypes.STR, description='pulling, cutting, packing, transport or netting'),
            OpenApiParameter('stage', OpenApiTypes.STR, description='Current stage'),
            OpenApiParameter('payment_status', OpenApiTypes.STR, description='Settlement status'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        # Actual times are only set by the stage machine or later updates
        data.pop('actual_start', None)
        data.pop('actual_end', None)
        try:
            schedule = create_schedule(
                actor_id=current_actor_id(request.user),
                **self._references(data),
                **data
            )
        except FarmServiceError as e:
            return error_response(e)

        return self._schedule_response(schedule.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.pop('work_type', None)
        try:
            update_schedule(schedule_id=kwargs['pk'], **self._references(data), **data)
        except FarmServiceError as e:
            return error_response(e)

        return self._schedule_response(kwargs['pk'])

    def destroy(self, request, *args, **kwargs):
        try:
            delete_schedule(schedule_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=AdvanceStageSerializer,
        responses={
            200: ScheduleSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=['post'])
    def advance(self, request, pk=None):
        """Move the schedule to the given stage."""
        serializer = AdvanceStageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            advance_stage(
                schedule_id=pk,
                next_stage=serializer.validated_data['stage'],
                actor_id=current_actor_id(request.user),
            )
        except FarmServiceError as e:
            return error_response(e)

        return self._schedule_response(pk)

    @extend_schema(
        request=CompletionDetailsSerializer,
        responses={200: ScheduleSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'])
    def completion(self, request, pk=None):
        """Record quantities and price measured on site."""
        serializer = CompletionDetailsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        extra = {
            key: value
            for key, value in data.pop('extra', {}).items()
            if key not in data and key != 'schedule_id'
        }
        try:
            record_completion_details(schedule_id=pk, **extra, **data)
        except FarmServiceError as e:
            return error_response(e)

        return self._schedule_response(pk)

    @extend_schema(
        request=AdditionalSettlementWriteSerializer,
        responses={201: AdditionalSettlementSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path='additional-settlements')
    def additional_settlements(self, request, pk=None):
        """Append an additional settlement."""
        serializer = AdditionalSettlementWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        try:
            settlement = add_additional_settlement(
                schedule_id=pk,
                category_id=data.pop('category', None),
                **data
            )
        except FarmServiceError as e:
            return error_response(e)

        return Response(AdditionalSettlementSerializer(settlement).data, status=status.HTTP_201_CREATED)
