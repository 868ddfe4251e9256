from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.api import ErrorResponseSerializer, StandardPagination, error_response
from apps.core.exceptions import FarmServiceError
from apps.core.identity import current_actor_id

from .models import Payment
from .serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    PaymentUpdateSerializer,
    PaymentStatusSerializer,
)
from .services import (
    list_payments,
    get_payment_by_id,
    create_payment,
    update_payment,
    update_payment_status,
    delete_payment,
)


class PaymentViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.ListModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for settlement payments.

    Editing a payment may change the schedules it settles; dropped schedules
    are released back to pending.
    """

    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        params = self.request.query_params
        return list_payments(
            receiver_id=params.get('receiver'),
            status=params.get('status'),
            date_from=params.get('date_from'),
            date_to=params.get('date_to'),
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return PaymentCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return PaymentUpdateSerializer
        return PaymentSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter('receiver', OpenApiTypes.UUID, description='Filter by receiving worker'),
            OpenApiParameter('status', OpenApiTypes.STR, description='pending, processing or completed'),
            OpenApiParameter('date_from', OpenApiTypes.DATE, description='Payment date from'),
            OpenApiParameter('date_to', OpenApiTypes.DATE, description='Payment date to'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        request=PaymentCreateSerializer,
        responses={201: PaymentSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    def create(self, request, *args, **kwargs):
        """Create a settlement over the given schedules."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        try:
            payment = create_payment(
                receiver_id=data.pop('receiver'),
                payer_id=current_actor_id(request.user),
                **data
            )
        except FarmServiceError as e:
            return error_response(e)

        payment = get_payment_by_id(payment_id=payment.id)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=PaymentUpdateSerializer,
        responses={200: PaymentSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    def update(self, request, *args, **kwargs):
        """Edit payment fields; a new schedule_ids list replaces the settled set."""
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            payment = update_payment(payment_id=kwargs['pk'], **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(PaymentSerializer(get_payment_by_id(payment_id=payment.id)).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_payment(payment_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=PaymentStatusSerializer,
        responses={200: PaymentSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Change the payment status; linked schedules follow."""
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            update_payment_status(payment_id=pk, status=serializer.validated_data['status'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(PaymentSerializer(get_payment_by_id(payment_id=pk)).data)
