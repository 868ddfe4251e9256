from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .queries import DashboardQueries
from .serializers import DashboardResponseSerializer


@extend_schema(
    responses={200: DashboardResponseSerializer},
    description="Per-entity totals for the office dashboard.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Dashboard counts - thin HTTP handler."""
    data = DashboardQueries.overview()
    return Response(DashboardResponseSerializer(data).data)
