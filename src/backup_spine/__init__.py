"""
backup-spine - recurrence policies and backup schedule tracking.

- backup_spine.core: errors, Result, enums, logging, settings
- backup_spine.policy: time format, weekday tokens, recurrence kinds, next fire
- backup_spine.schedule: schedule models, run history, lifecycle, tracker
- backup_spine.store: named, versioned records
- backup_spine.serialization: wire format
"""

__version__ = "0.1.0"

from backup_spine.core import *  # noqa: F401,F403
from backup_spine.policy import (  # noqa: F401
    DailyPolicy,
    HourlyPolicy,
    MonthlyPolicy,
    SchedulePolicy,
    SchedulePolicySpec,
    WeeklyPolicy,
    Weekday,
    next_eligible_fire,
    validate_time,
)
from backup_spine.schedule import (  # noqa: F401
    BackupSchedule,
    BackupScheduleSpec,
    BackupScheduleStatus,
    RunHistory,
    ScheduleTracker,
    StatusInfo,
)
from backup_spine.store import Catalog  # noqa: F401
