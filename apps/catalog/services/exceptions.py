"""Domain-specific exceptions for catalog services."""
from apps.core.exceptions import NotFoundError, ValidationError


class CategoryNotFoundError(NotFoundError):
    """Raised when a category does not exist."""
    pass


class RateNotFoundError(NotFoundError):
    """Raised when a rate does not exist within its category."""
    pass


class InvalidCategoryError(ValidationError):
    """Raised when category fields are missing or invalid."""
    pass


class InvalidRateError(ValidationError):
    """Raised when rate fields are missing or invalid."""
    pass


class LookupValueNotFoundError(NotFoundError):
    """Raised when a payment group, crop type or work type does not exist."""
    pass


class DuplicateLookupValueError(ValidationError):
    """Raised when a lookup value with the same name already exists."""
    pass


class InvalidLookupValueError(ValidationError):
    """Raised when a lookup value name is blank."""
    pass
