"""
Schedules app services layer.

Schedule records, the stage state machine and per-schedule settlement math.
"""

from .exceptions import (
    ScheduleNotFoundError,
    InvalidScheduleError,
    InvalidStageTransitionError,
)

from .stage_machine import (
    TRANSITIONS,
    INITIAL_STAGE,
    allowed_next_stages,
    is_terminal,
    advance_stage,
    detach_from_payment,
)

from .schedule_management import (
    get_schedule_by_id,
    list_schedules,
    create_schedule,
    update_schedule,
    delete_schedule,
)

from .settlement import (
    settlement_total,
    record_completion_details,
    add_additional_settlement,
)


__all__ = [
    # Exceptions
    'ScheduleNotFoundError',
    'InvalidScheduleError',
    'InvalidStageTransitionError',

    # Stage machine
    'TRANSITIONS',
    'INITIAL_STAGE',
    'allowed_next_stages',
    'is_terminal',
    'advance_stage',
    'detach_from_payment',

    # Schedules
    'get_schedule_by_id',
    'list_schedules',
    'create_schedule',
    'update_schedule',
    'delete_schedule',

    # Settlement
    'settlement_total',
    'record_completion_details',
    'add_additional_settlement',
]
