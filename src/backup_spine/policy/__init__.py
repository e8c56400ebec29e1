"""Recurrence policies: time format, weekday tokens, the four kinds, next fire."""

from backup_spine.policy.spec import SchedulePolicy, SchedulePolicySpec
from backup_spine.policy.timefmt import check_time_format, parse_time, validate_time
from backup_spine.policy.triggers import (
    fires_between,
    next_eligible_fire,
    resolve_month_date,
    to_cron_expression,
)
from backup_spine.policy.variants import (
    DailyPolicy,
    HourlyPolicy,
    MonthlyPolicy,
    RecurrencePolicy,
    WeeklyPolicy,
)
from backup_spine.policy.weekdays import DAY_TOKENS, Weekday, lookup_day, normalize_day

__all__ = [
    "SchedulePolicy",
    "SchedulePolicySpec",
    "check_time_format",
    "parse_time",
    "validate_time",
    "fires_between",
    "next_eligible_fire",
    "resolve_month_date",
    "to_cron_expression",
    "DailyPolicy",
    "HourlyPolicy",
    "MonthlyPolicy",
    "RecurrencePolicy",
    "WeeklyPolicy",
    "DAY_TOKENS",
    "Weekday",
    "lookup_day",
    "normalize_day",
]
