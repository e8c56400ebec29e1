"""
Shared enums for backup policies and schedules.

Values are the stable wire strings consumers rely on.

STDLIB ONLY - NO PYDANTIC.
"""

from enum import Enum


class PolicyKind(str, Enum):
    """Recurrence kind of a schedule policy; value is the wire key."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ConcurrencyPolicy(str, Enum):
    """
    How a fire is handled while the previous run is still in progress.

    ALLOW starts another run alongside it; FORBID (the default) skips the
    fire without queueing a replacement.
    """

    ALLOW = "Allow"
    FORBID = "Forbid"


class ReclaimPolicy(str, Enum):
    """Disposition of a schedule's backups once the schedule is removed."""

    DELETE = "Delete"
    RETAIN = "Retain"


class ScheduleStatus(str, Enum):
    """Lifecycle of a backup schedule."""

    PENDING = "Pending"
    ACTIVE = "Active"
    INACTIVE = "InActive"
    FAILED = "Failed"
    DELETING = "Deleting"


class ExecutionStatus(str, Enum):
    """Outcome of one triggered run."""

    IN_PROGRESS = "InProgress"
    SUCCESS = "Success"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.IN_PROGRESS
