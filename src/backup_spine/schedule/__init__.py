"""Backup schedules: models, run history, lifecycle tables and the tracker."""

from backup_spine.schedule.history import DEFAULT_HISTORY_LIMIT, RunHistory, StatusInfo
from backup_spine.schedule.models import BackupSchedule, BackupScheduleSpec, BackupScheduleStatus
from backup_spine.schedule.state import (
    EXECUTION_TRANSITIONS,
    SCHEDULE_TRANSITIONS,
    accepts_new_runs,
    can_transition_execution,
    can_transition_schedule,
    transition_execution,
    transition_schedule,
)
from backup_spine.schedule.tracker import FireDecision, ScheduleTracker, SkipReason

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "RunHistory",
    "StatusInfo",
    "BackupSchedule",
    "BackupScheduleSpec",
    "BackupScheduleStatus",
    "EXECUTION_TRANSITIONS",
    "SCHEDULE_TRANSITIONS",
    "accepts_new_runs",
    "can_transition_execution",
    "can_transition_schedule",
    "transition_execution",
    "transition_schedule",
    "FireDecision",
    "ScheduleTracker",
    "SkipReason",
]
