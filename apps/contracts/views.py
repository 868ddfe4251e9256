from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.api import ErrorResponseSerializer, StandardPagination, error_response
from apps.core.exceptions import FarmServiceError
from apps.core.identity import current_actor_id

from .models import Contract
from .serializers import (
    ContractSerializer,
    ContractCreateSerializer,
    ContractUpdateSerializer,
    ContractStatusSerializer,
    MarkLinePaidSerializer,
    PaymentLineSerializer,
)
from .services import (
    list_contracts,
    get_contract_by_id,
    get_contract_types,
    create_contract,
    update_contract,
    update_contract_status,
    delete_contract,
    mark_line_paid,
    schedule_line,
)


class ContractViewSet(viewsets.ModelViewSet):
    """
    ViewSet for contracts and their payment lines.

    list: Contracts, filterable by ``farmer`` and ``status``
    create: Create a contract with all payment lines unpaid
    retrieve: Contract with paid-to-date, outstanding and next due line
    status: Set the contract status explicitly
    """

    queryset = Contract.objects.all()
    serializer_class = ContractSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        return list_contracts(
            farmer_id=self.request.query_params.get('farmer'),
            status=self.request.query_params.get('status'),
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return ContractCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return ContractUpdateSerializer
        return ContractSerializer

    def _contract_response(self, contract_id, status_code=status.HTTP_200_OK):
        contract = get_contract_by_id(contract_id=contract_id)
        return Response(ContractSerializer(contract).data, status=status_code)

    @extend_schema(
        parameters=[
            OpenApiParameter('farmer', OpenApiTypes.UUID, description='Filter by farmer'),
            OpenApiParameter('status', OpenApiTypes.STR, description='Filter by contract status'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        """Create a new contract."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        try:
            contract = create_contract(
                farmer_id=data.pop('farmer'),
                created_by=current_actor_id(request.user),
                **data
            )
        except FarmServiceError as e:
            return error_response(e)

        return self._contract_response(contract.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            contract = update_contract(contract_id=kwargs['pk'], **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return self._contract_response(contract.id)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_contract(contract_id=kwargs['pk'])
        except FarmServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=ContractStatusSerializer,
        responses={200: ContractSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Set the contract status. Payment lines are left as they are."""
        serializer = ContractStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            update_contract_status(contract_id=pk, status=serializer.validated_data['status'])
        except FarmServiceError as e:
            return error_response(e)

        return self._contract_response(pk)

    @extend_schema(
        request=MarkLinePaidSerializer,
        responses={200: PaymentLineSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path=r'lines/(?P<line_id>[^/.]+)/pay')
    def pay_line(self, request, pk=None, line_id=None):
        """Mark one payment line as paid."""
        serializer = MarkLinePaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            line = mark_line_paid(contract_id=pk, line_id=line_id, **serializer.validated_data)
        except FarmServiceError as e:
            return error_response(e)

        return Response(PaymentLineSerializer(line).data)

    @extend_schema(
        request=None,
        responses={200: PaymentLineSerializer, 404: ErrorResponseSerializer},
    )
    @action(detail=True, methods=['post'], url_path=r'lines/(?P<line_id>[^/.]+)/schedule')
    def schedule_payment_line(self, request, pk=None, line_id=None):
        """Mark one payment line as scheduled."""
        try:
            line = schedule_line(contract_id=pk, line_id=line_id)
        except FarmServiceError as e:
            return error_response(e)

        return Response(PaymentLineSerializer(line).data)

    @extend_schema(responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=['get'])
    def types(self, request):
        """Known contract types."""
        return Response(get_contract_types())
