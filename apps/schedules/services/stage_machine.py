"""
Schedule stage state machine.

    예정 -> 준비중 -> 진행중 -> 완료
      \\        \\        \\
       +--------+--------+--> 취소

완료 and 취소 are terminal. Every transition appends one history row and
updates ``stage_current`` in the same transaction.
"""

import logging
from typing import FrozenSet
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.core.store import get_or_not_found, translate_store_errors
from apps.payments.models import SettlementItem

from ..models import Schedule, SchedulePaymentStatus, StageTransition, WorkStage
from .exceptions import InvalidStageTransitionError, ScheduleNotFoundError

logger = logging.getLogger(__name__)

TRANSITIONS = {
    WorkStage.SCHEDULED: frozenset({WorkStage.PREPARING, WorkStage.CANCELLED}),
    WorkStage.PREPARING: frozenset({WorkStage.IN_PROGRESS, WorkStage.CANCELLED}),
    WorkStage.IN_PROGRESS: frozenset({WorkStage.COMPLETED, WorkStage.CANCELLED}),
    WorkStage.COMPLETED: frozenset(),
    WorkStage.CANCELLED: frozenset(),
}

INITIAL_STAGE = WorkStage.SCHEDULED


def allowed_next_stages(stage: str) -> FrozenSet[str]:
    """Stages reachable from ``stage``; empty for terminal or unknown stages."""
    return TRANSITIONS.get(stage, frozenset())


def is_terminal(stage: str) -> bool:
    return not allowed_next_stages(stage)


def detach_from_payment(schedule: Schedule) -> None:
    """Remove the schedule from its settlement and reset its payment status. Caller saves."""
    SettlementItem.objects.filter(schedule=schedule).delete()
    schedule.payment = None
    schedule.payment_status = SchedulePaymentStatus.PENDING


@translate_store_errors
@transaction.atomic
def advance_stage(*, schedule_id: UUID, next_stage: str, actor_id: str) -> Schedule:
    """
    Move a schedule to ``next_stage``.

    Entering 완료 fills in ``actual_end`` (and ``actual_start`` from the
    scheduled start) when they are still empty. Entering 취소 takes the
    schedule out of any settlement it was part of.

    Args:
        schedule_id: Schedule to advance
        next_stage: Target stage label
        actor_id: Id stamped as ``by`` on the history row

    Returns:
        Updated Schedule

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        InvalidStageTransitionError: If the current stage is terminal or
            ``next_stage`` is not one of its successors
    """
    schedule = get_or_not_found(
        Schedule.objects.select_for_update(),
        ScheduleNotFoundError,
        f"Schedule {schedule_id} not found",
        pk=schedule_id,
    )

    current = schedule.stage_current
    if is_terminal(current):
        raise InvalidStageTransitionError(f"Schedule is already {current}")
    if next_stage not in allowed_next_stages(current):
        raise InvalidStageTransitionError(f"Cannot move from {current} to {next_stage}")

    now = timezone.now()
    StageTransition.objects.create(schedule=schedule, stage=next_stage, timestamp=now, by=actor_id)

    schedule.stage_current = next_stage
    update_fields = ['stage_current', 'updated_at']

    if next_stage == WorkStage.COMPLETED:
        if schedule.actual_start is None:
            schedule.actual_start = schedule.scheduled_start
            update_fields.append('actual_start')
        if schedule.actual_end is None:
            schedule.actual_end = now
            update_fields.append('actual_end')
    elif next_stage == WorkStage.CANCELLED and schedule.payment_id:
        detach_from_payment(schedule)
        update_fields += ['payment', 'payment_status']

    schedule.save(update_fields=update_fields)
    logger.info("Schedule %s stage %s -> %s by %s", schedule.id, current, next_stage, actor_id)
    return schedule
