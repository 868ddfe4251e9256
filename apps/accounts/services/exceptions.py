"""Domain-specific exceptions for accounts services."""
from rest_framework import status

from apps.core.exceptions import FarmServiceError, ValidationError


class AccountsServiceError(FarmServiceError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(ValidationError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    status_code = status.HTTP_403_FORBIDDEN
