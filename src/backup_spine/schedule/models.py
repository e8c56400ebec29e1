"""Backup schedule models.

Manifesto:
    A backup schedule ties a recurrence policy (referenced by name, shared
    with other schedules) to a backup template, plus the knobs that govern
    overlap, retries and late starts. Its status is owned by the schedule
    alone and written by a single controller loop.

The ``last_*`` status fields are derived from the newest history entry so
they can never drift from it.

Tags:
    backup-spine, models, scheduling, dataclasses

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from backup_spine.core.enums import (
    ConcurrencyPolicy,
    ExecutionStatus,
    ReclaimPolicy,
    ScheduleStatus,
)
from backup_spine.core.errors import RangeError, ValidationError
from backup_spine.core.result import OK, Err, Result
from backup_spine.core.settings import get_settings
from backup_spine.schedule.history import RunHistory, StatusInfo

MIN_RETRIES = 1
MAX_RETRIES = 5

# ---------------------------------------------------------------------------
# spec
# ---------------------------------------------------------------------------


@dataclass
class BackupScheduleSpec:
    """Desired state of a backup schedule."""

    recurrence_policy_ref: str | None = None  # None: manual trigger only
    reclaim_policy: ReclaimPolicy = ReclaimPolicy.RETAIN
    enabled: bool = True
    max_retries_on_failure: int = field(default_factory=lambda: get_settings().default_max_retries)
    starting_deadline: timedelta | None = None
    concurrency_policy: ConcurrencyPolicy = ConcurrencyPolicy.FORBID
    backup_template: dict[str, Any] = field(default_factory=dict)

    @property
    def manual_only(self) -> bool:
        return not self.recurrence_policy_ref

    def validate(self) -> Result[None]:
        retries = self.max_retries_on_failure
        if isinstance(retries, bool) or not isinstance(retries, int) or not MIN_RETRIES <= retries <= MAX_RETRIES:
            return Err(RangeError(
                f"maxRetriesOnFailure is {retries!r}, you should provide a value "
                f"in [{MIN_RETRIES},{MAX_RETRIES}]",
                field="maxRetriesOnFailure",
                values=[retries],
            ))
        if self.starting_deadline is not None and self.starting_deadline < timedelta(0):
            return Err(RangeError(
                f"startingDeadlineSeconds is {self.starting_deadline.total_seconds():g}, "
                "it must not be negative",
                field="startingDeadlineSeconds",
                values=[self.starting_deadline.total_seconds()],
            ))
        if not isinstance(self.reclaim_policy, ReclaimPolicy):
            return Err(ValidationError(
                f"unknown reclaim policy: {self.reclaim_policy!r}",
                field="reclaimPolicy",
                values=[self.reclaim_policy],
            ))
        if not isinstance(self.concurrency_policy, ConcurrencyPolicy):
            return Err(ValidationError(
                f"unknown concurrency policy: {self.concurrency_policy!r}",
                field="concurrentPolicy",
                values=[self.concurrency_policy],
            ))
        return OK

    def check(self) -> None:
        self.validate().unwrap()


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


@dataclass
class BackupScheduleStatus:
    """Observed state of a backup schedule."""

    recent_status_info: RunHistory = field(default_factory=lambda: RunHistory(get_settings().history_limit))
    sched_status: ScheduleStatus = ScheduleStatus.PENDING
    backup_status: Any = None  # opaque BackupState of the latest completed run
    message: str | None = None  # reason for Failed
    next_fire_time: datetime | None = None

    @property
    def latest(self) -> StatusInfo | None:
        return self.recent_status_info.latest

    @property
    def last_backup_name(self) -> str | None:
        latest = self.latest
        return latest.backup_name if latest else None

    @property
    def last_execution_status(self) -> ExecutionStatus | None:
        latest = self.latest
        return latest.exec_status if latest else None

    @property
    def last_start_timestamp(self) -> datetime | None:
        latest = self.latest
        return latest.start_timestamp if latest else None

    @property
    def last_completion_timestamp(self) -> datetime | None:
        latest = self.latest
        return latest.completion_timestamp if latest else None


# ---------------------------------------------------------------------------
# record
# ---------------------------------------------------------------------------


@dataclass
class BackupSchedule:
    """Named, versioned backup schedule record."""

    name: str
    spec: BackupScheduleSpec = field(default_factory=BackupScheduleSpec)
    status: BackupScheduleStatus = field(default_factory=BackupScheduleStatus)
    version: int = 1

    def validate(self) -> Result[None]:
        result = self.spec.validate()
        if result.is_err():
            result.error.with_context(schedule=self.name)
        return result

    @property
    def deleting(self) -> bool:
        return self.status.sched_status is ScheduleStatus.DELETING


__all__ = [
    "BackupScheduleSpec",
    "BackupScheduleStatus",
    "BackupSchedule",
    "StatusInfo",
]
