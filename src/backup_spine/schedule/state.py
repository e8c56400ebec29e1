"""Lifecycle transition tables for schedules and runs.

Schedule::

    Pending ──► Active ◄──► InActive
       │          │            │
       └──► Failed ◄───────────┘        (policy missing or invalid)
              │
              └──► Pending              (configuration fixed)

    any non-terminal ──► Deleting       (terminal)

Run::

    InProgress ──► Success | Failed     (both terminal)

Moving to the current state is a no-op.
"""

from __future__ import annotations

from types import MappingProxyType

from backup_spine.core.enums import ExecutionStatus, ScheduleStatus
from backup_spine.core.errors import InvalidTransitionError

SCHEDULE_TRANSITIONS = MappingProxyType({
    ScheduleStatus.PENDING: frozenset({
        ScheduleStatus.ACTIVE,
        ScheduleStatus.INACTIVE,
        ScheduleStatus.FAILED,
        ScheduleStatus.DELETING,
    }),
    ScheduleStatus.ACTIVE: frozenset({
        ScheduleStatus.INACTIVE,
        ScheduleStatus.FAILED,
        ScheduleStatus.DELETING,
    }),
    ScheduleStatus.INACTIVE: frozenset({
        ScheduleStatus.ACTIVE,
        ScheduleStatus.FAILED,
        ScheduleStatus.DELETING,
    }),
    ScheduleStatus.FAILED: frozenset({
        ScheduleStatus.PENDING,
        ScheduleStatus.DELETING,
    }),
    ScheduleStatus.DELETING: frozenset(),
})

EXECUTION_TRANSITIONS = MappingProxyType({
    ExecutionStatus.IN_PROGRESS: frozenset({ExecutionStatus.SUCCESS, ExecutionStatus.FAILED}),
    ExecutionStatus.SUCCESS: frozenset(),
    ExecutionStatus.FAILED: frozenset(),
})


def can_transition_schedule(current: ScheduleStatus, target: ScheduleStatus) -> bool:
    return current is target or target in SCHEDULE_TRANSITIONS[current]


def transition_schedule(current: ScheduleStatus, target: ScheduleStatus) -> ScheduleStatus:
    """Return ``target`` if the move is allowed, else raise InvalidTransitionError."""
    if not can_transition_schedule(current, target):
        raise InvalidTransitionError("schedule", current.value, target.value)
    return target


def can_transition_execution(current: ExecutionStatus, target: ExecutionStatus) -> bool:
    return current is target or target in EXECUTION_TRANSITIONS[current]


def transition_execution(current: ExecutionStatus, target: ExecutionStatus) -> ExecutionStatus:
    """Return ``target`` if the move is allowed, else raise InvalidTransitionError."""
    if not can_transition_execution(current, target):
        raise InvalidTransitionError("execution", current.value, target.value)
    return target


def accepts_new_runs(status: ScheduleStatus) -> bool:
    """Whether the trigger engine may start runs for a schedule in ``status``."""
    return status is ScheduleStatus.ACTIVE
