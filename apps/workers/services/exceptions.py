"""Domain-specific exceptions for worker services."""
from apps.core.exceptions import NotFoundError, ValidationError


class WorkerNotFoundError(NotFoundError):
    """Raised when a worker does not exist."""
    pass


class InvalidWorkerError(ValidationError):
    """Raised when worker fields are missing or invalid."""
    pass
