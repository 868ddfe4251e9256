"""
Shared error kinds for the farm services.

Every app defines its own exceptions module whose classes derive from one of
the kinds below, so views can translate any service failure into an HTTP
response without knowing which app raised it.
"""
from rest_framework import status


class FarmServiceError(Exception):
    """Base exception for all farm service errors."""
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(FarmServiceError):
    """Raised when a required field is missing or invalid. Nothing is written."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FarmServiceError):
    """Raised when a referenced entity does not exist at mutation time."""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransitionError(FarmServiceError):
    """Raised when a stage transition is not allowed from the current stage."""
    status_code = status.HTTP_409_CONFLICT


class StoreError(FarmServiceError):
    """Raised when the underlying database call failed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
