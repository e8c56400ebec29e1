"""Schedule tracker - lifecycle, fire gating and run bookkeeping.

Manifesto:
    The trigger engine owns the clock and the backup subsystem owns the
    runs. The tracker owns the decisions between them: whether a schedule
    is live, whether a fire may start a run, whether a failed run may be
    retried, and what the status shows afterwards.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SCHEDULE TRACKER                                                             │
│                                                                               │
│   trigger engine ──► on_fire(name, scheduled_at, now)                         │
│                        ├── schedule not Active        → skip (not_active)     │
│                        ├── late by > startingDeadline → skip (deadline)       │
│                        ├── newest run InProgress                              │
│                        │     ├── Forbid               → skip (concurrent)     │
│                        │     └── Allow                → start another run     │
│                        └── otherwise                  → on_run_started()      │
│                                                                               │
│   backup subsystem ──► on_run_completed(name, backup, status, at, state)      │
│                        └── Failed: retry() until maxRetriesOnFailure spent    │
│                                                                               │
│   controller ──► reconcile(name)   Pending/Failed → Active | InActive | Failed│
│                  set_enabled()     Active ⇄ InActive                          │
│                  mark_deleting()   → Deleting (terminal, no new runs)         │
└──────────────────────────────────────────────────────────────────────────────┘

Single writer per schedule: the tracker takes no locks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from backup_spine.core.enums import ConcurrencyPolicy, ExecutionStatus, ScheduleStatus
from backup_spine.core.errors import PolicyNotFoundError, ScheduleError
from backup_spine.core.logging import LogContext, get_logger
from backup_spine.core.timestamps import local_now
from backup_spine.policy.triggers import missed_by, next_eligible_fire
from backup_spine.schedule.history import StatusInfo
from backup_spine.schedule.models import BackupSchedule
from backup_spine.schedule.state import accepts_new_runs, transition_execution, transition_schedule

if TYPE_CHECKING:
    from backup_spine.store import Catalog

logger = get_logger(__name__)


class SkipReason(str, Enum):
    """Why a fire did not start a run."""

    NOT_ACTIVE = "not_active"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CONCURRENT_RUN = "concurrent_run"
    RETRIES_EXHAUSTED = "retries_exhausted"


@dataclass(frozen=True)
class FireDecision:
    """Outcome of a fire or retry request."""

    started: bool
    backup_name: str | None = None
    reason: SkipReason | None = None
    attempt: int = 0

    @classmethod
    def skip(cls, reason: SkipReason) -> FireDecision:
        return cls(started=False, reason=reason)


def default_backup_name(schedule_name: str, scheduled_at: datetime) -> str:
    """Backup name for the run a schedule starts at ``scheduled_at``."""
    return f"{schedule_name}-{scheduled_at:%Y%m%d%H%M%S}"


class ScheduleTracker:
    """Drives schedule status from trigger-engine and backup-subsystem events.

    Example:
        >>> catalog = Catalog()
        >>> catalog.policies.create(SchedulePolicy("nightly", SchedulePolicySpec(DailyPolicy("01:30"))))
        >>> catalog.new_schedule("db", BackupScheduleSpec(recurrence_policy_ref="nightly"))
        >>> tracker = ScheduleTracker(catalog)
        >>> tracker.reconcile("db")
        <ScheduleStatus.ACTIVE: 'Active'>
        >>> tracker.on_fire("db", scheduled_at=fire_time, now=fire_time).started
        True
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def _schedule(self, name: str) -> BackupSchedule:
        return self.catalog.schedules.get(name)

    def _move(self, schedule: BackupSchedule, target: ScheduleStatus, message: str | None = None) -> ScheduleStatus:
        current = schedule.status.sched_status
        schedule.status.sched_status = transition_schedule(current, target)
        schedule.status.message = message
        if current is not target:
            logger.info(
                "schedule_transition",
                schedule=schedule.name,
                from_status=current.value,
                to_status=target.value,
                message=message,
            )
        return target

    # === Lifecycle ===

    def reconcile(self, name: str, now: datetime | None = None) -> ScheduleStatus:
        """Evaluate the referenced policy and settle the schedule's status.

        A missing or invalid policy moves the schedule to Failed with the
        reason in ``status.message``. A Failed schedule whose configuration
        is fixed goes back through Pending.
        """
        schedule = self._schedule(name)
        status = schedule.status
        if status.sched_status is ScheduleStatus.DELETING:
            return status.sched_status

        problem = self._configuration_problem(schedule)
        if problem is not None:
            status.next_fire_time = None
            return self._move(schedule, ScheduleStatus.FAILED, problem.message)

        if status.sched_status is ScheduleStatus.FAILED:
            self._move(schedule, ScheduleStatus.PENDING)

        target = ScheduleStatus.ACTIVE if schedule.spec.enabled else ScheduleStatus.INACTIVE
        self._move(schedule, target)
        self._refresh_next_fire(schedule, now or local_now())
        return target

    def _configuration_problem(self, schedule: BackupSchedule) -> Exception | None:
        spec_check = schedule.validate()
        if spec_check.is_err():
            return spec_check.error
        if schedule.spec.manual_only:
            return None
        policy = self.catalog.policy_for(schedule)
        if policy is None:
            return PolicyNotFoundError(schedule.spec.recurrence_policy_ref).with_context(schedule=schedule.name)
        policy_check = policy.validate()
        if policy_check.is_err():
            return policy_check.error.with_context(schedule=schedule.name)
        return None

    def _refresh_next_fire(self, schedule: BackupSchedule, after: datetime) -> None:
        policy = self.catalog.policy_for(schedule)
        if schedule.status.sched_status is not ScheduleStatus.ACTIVE or policy is None:
            schedule.status.next_fire_time = None
            return
        schedule.status.next_fire_time = next_eligible_fire(policy, after)

    def set_enabled(self, name: str, enabled: bool, now: datetime | None = None) -> ScheduleStatus:
        """Suspend or resume triggering without deleting the schedule."""
        schedule = self._schedule(name)
        schedule.spec.enabled = enabled
        current = schedule.status.sched_status
        if current in (ScheduleStatus.ACTIVE, ScheduleStatus.INACTIVE):
            target = ScheduleStatus.ACTIVE if enabled else ScheduleStatus.INACTIVE
            self._move(schedule, target)
            self._refresh_next_fire(schedule, now or local_now())
            return target
        return current

    def mark_deleting(self, name: str) -> ScheduleStatus:
        """Enter the terminal Deleting state; no new runs start afterwards."""
        schedule = self._schedule(name)
        schedule.status.next_fire_time = None
        return self._move(schedule, ScheduleStatus.DELETING)

    def next_fire(self, name: str, after: datetime) -> datetime | None:
        """Next fire time of an Active scheduled schedule, else None."""
        schedule = self._schedule(name)
        policy = self.catalog.policy_for(schedule)
        if not accepts_new_runs(schedule.status.sched_status) or policy is None:
            return None
        return next_eligible_fire(policy, after)

    # === Fires ===

    def on_fire(
        self,
        name: str,
        scheduled_at: datetime,
        now: datetime | None = None,
        backup_name: str | None = None,
    ) -> FireDecision:
        """Decide whether a scheduled fire starts a run, and record it if so."""
        schedule = self._schedule(name)
        now = now or local_now(scheduled_at.tzinfo)
        spec = schedule.spec

        if not accepts_new_runs(schedule.status.sched_status):
            return self._skipped(schedule, SkipReason.NOT_ACTIVE, scheduled_at)

        if spec.starting_deadline is not None and missed_by(scheduled_at, now) > spec.starting_deadline:
            self._refresh_next_fire(schedule, now)
            return self._skipped(schedule, SkipReason.DEADLINE_EXCEEDED, scheduled_at)

        latest = schedule.status.latest
        if latest is not None and latest.in_progress and spec.concurrency_policy is ConcurrencyPolicy.FORBID:
            self._refresh_next_fire(schedule, scheduled_at)
            return self._skipped(schedule, SkipReason.CONCURRENT_RUN, scheduled_at)

        backup_name = backup_name or default_backup_name(name, scheduled_at)
        self.on_run_started(name, backup_name, now)
        self._refresh_next_fire(schedule, scheduled_at)
        return FireDecision(started=True, backup_name=backup_name)

    def _skipped(self, schedule: BackupSchedule, reason: SkipReason, scheduled_at: datetime) -> FireDecision:
        logger.info(
            "fire_skipped",
            schedule=schedule.name,
            reason=reason.value,
            scheduled_at=scheduled_at.isoformat(),
        )
        return FireDecision.skip(reason)

    # === Runs ===

    def on_run_started(self, name: str, backup_name: str, start: datetime, attempt: int = 0) -> StatusInfo:
        """Record a run that has started; also used for manual triggers."""
        schedule = self._schedule(name)
        if schedule.deleting:
            raise ScheduleError(
                f"backup schedule {name} is being deleted, no new runs may start"
            ).with_context(schedule=name, backup_name=backup_name)

        entry = StatusInfo(backup_name=backup_name, start_timestamp=start, attempt=attempt)
        evicted = schedule.status.recent_status_info.add(entry)
        with LogContext(schedule=name, backup_name=backup_name):
            logger.info(
                "run_started",
                attempt=attempt,
                evicted=evicted.backup_name if evicted else None,
            )
        return entry

    def on_run_completed(
        self,
        name: str,
        backup_name: str,
        status: ExecutionStatus,
        completion: datetime,
        backup_state: Any = None,
    ) -> StatusInfo | None:
        """Record the terminal outcome of a run.

        Returns:
            The updated entry, or None if the run already left the history.

        Raises:
            InvalidTransitionError: if the run already finished with a
                different outcome.
        """
        schedule = self._schedule(name)
        history = schedule.status.recent_status_info
        with LogContext(schedule=name, backup_name=backup_name):
            entry = history.find(backup_name)
            if entry is None:
                logger.warning("run_not_in_history")
                return None

            entry.exec_status = transition_execution(entry.exec_status, status)
            if not status.is_terminal:
                return entry

            entry.completion_timestamp = completion
            if entry is history.latest:
                schedule.status.backup_status = backup_state
            logger.info("run_completed", exec_status=status.value, attempt=entry.attempt)
        return entry

    # === Retries ===

    def retries_remaining(self, name: str) -> int:
        """Retries still allowed for the newest run, 0 unless it Failed."""
        schedule = self._schedule(name)
        latest = schedule.status.latest
        if latest is None or latest.exec_status is not ExecutionStatus.FAILED:
            return 0
        return max(schedule.spec.max_retries_on_failure - latest.attempt, 0)

    def retry(self, name: str, now: datetime | None = None) -> FireDecision:
        """Start the next retry of the newest run if it failed and retries remain.

        Only an Active schedule retries; a suspended or deleting one skips.
        """
        schedule = self._schedule(name)
        now = now or local_now()
        if not accepts_new_runs(schedule.status.sched_status):
            return self._skipped(schedule, SkipReason.NOT_ACTIVE, now)
        if self.retries_remaining(name) == 0:
            return self._skipped(schedule, SkipReason.RETRIES_EXHAUSTED, now)

        failed = schedule.status.latest
        attempt = failed.attempt + 1
        base_name = failed.backup_name.rsplit("-retry-", 1)[0] if failed.attempt else failed.backup_name
        backup_name = f"{base_name}-retry-{attempt}"
        self.on_run_started(name, backup_name, now, attempt=attempt)
        return FireDecision(started=True, backup_name=backup_name, attempt=attempt)


__all__ = ["ScheduleTracker", "FireDecision", "SkipReason", "default_backup_name"]
