"""View-side helpers shared by the farm apps."""
from rest_framework import serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """Default pagination for list endpoints."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ErrorResponseSerializer(serializers.Serializer):
    """Serializer for error responses."""
    error = serializers.CharField()


def error_response(exc):
    """Convert a FarmServiceError into an ``{"error": ...}`` response."""
    return Response({'error': str(exc)}, status=exc.status_code)
