"""Domain-specific exceptions for farmer and field services."""
from apps.core.exceptions import NotFoundError, ValidationError


class FarmerNotFoundError(NotFoundError):
    """Raised when a farmer does not exist."""
    pass


class FieldNotFoundError(NotFoundError):
    """Raised when a field does not exist."""
    pass


class InvalidFarmerError(ValidationError):
    """Raised when farmer fields are missing or invalid."""
    pass


class InvalidFieldError(ValidationError):
    """Raised when field data is missing or invalid."""
    pass
