"""Domain-specific exceptions for schedule services."""
from apps.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError


class ScheduleNotFoundError(NotFoundError):
    """Raised when a schedule does not exist."""
    pass


class InvalidScheduleError(ValidationError):
    """Raised when schedule fields are missing or invalid."""
    pass


class InvalidStageTransitionError(InvalidTransitionError):
    """Raised when the requested stage is not reachable from the current one."""
    pass
