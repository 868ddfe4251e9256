"""Domain-specific exceptions for payment services."""
from apps.core.exceptions import NotFoundError, ValidationError


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment does not exist."""
    pass


class InvalidPaymentError(ValidationError):
    """Raised when payment data is invalid (no schedules, non-positive amount, ...)."""
    pass


class ScheduleAlreadySettledError(InvalidPaymentError):
    """Raised when a schedule is already part of another settlement."""
    pass
