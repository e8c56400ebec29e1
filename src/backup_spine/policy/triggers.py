"""Next-fire computation for recurrence policies.

Reference implementation of the contract the trigger engine honors:
``next_eligible_fire(policy, after)`` returns the first fire time strictly
after ``after``. Times are wall-clock local time; the tzinfo of ``after``
(if any) is carried through unchanged.

Hourly, daily and weekly policies are rendered to a cron expression and
evaluated with croniter. Monthly policies are computed directly because
their missing-date rollover (31 in April fires on May 1) has no cron
equivalent.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime, timedelta

from croniter import croniter

from backup_spine.policy.spec import SchedulePolicy, SchedulePolicySpec
from backup_spine.policy.timefmt import parse_time
from backup_spine.policy.variants import MonthlyPolicy, RecurrencePolicy

logger = logging.getLogger(__name__)


def _unwrap(policy: RecurrencePolicy | SchedulePolicySpec | SchedulePolicy) -> RecurrencePolicy:
    if isinstance(policy, SchedulePolicy):
        return policy.spec.policy
    if isinstance(policy, SchedulePolicySpec):
        return policy.policy
    return policy


def to_cron_expression(policy: RecurrencePolicy | SchedulePolicySpec | SchedulePolicy) -> str:
    """Render a valid policy as a 5-field cron expression."""
    return _unwrap(policy).to_cron_expression()


def resolve_month_date(year: int, month: int, day: int) -> date:
    """Calendar date a monthly ``day`` fires on in ``year``/``month``.

    A day the month does not have rolls forward to the 1st of the next month.
    """
    _, days_in_month = calendar.monthrange(year, month)
    if day <= days_in_month:
        return date(year, month, day)
    if month == 12:
        return date(year + 1, 1, 1)
    return date(year, month + 1, 1)


def _add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_fire_dates(policy: MonthlyPolicy, year: int, month: int) -> list[date]:
    """Distinct fire dates produced by ``policy``'s dates for one month, sorted.

    Rolled-over dates land in the following month; several of them collapse
    into a single fire on the 1st.
    """
    policy.check()
    return sorted({resolve_month_date(year, month, day) for day in policy.dates})


def _next_monthly(policy: MonthlyPolicy, after: datetime) -> datetime:
    at = parse_time(policy.time)
    # Start one month back: its rolled-over dates can land in after's month.
    year, month = _add_months(after.year, after.month, -1)
    for _ in range(3):
        for fire_date in monthly_fire_dates(policy, year, month):
            candidate = datetime.combine(fire_date, at, tzinfo=after.tzinfo)
            if candidate > after:
                return candidate
        year, month = _add_months(year, month, 1)
    raise RuntimeError(f"no monthly fire found after {after.isoformat()}")


def next_eligible_fire(
    policy: RecurrencePolicy | SchedulePolicySpec | SchedulePolicy,
    after: datetime,
) -> datetime:
    """First fire time of ``policy`` strictly after ``after``.

    Raises:
        ValidationError: if the policy is invalid.
    """
    variant = _unwrap(policy)
    variant.check()

    if isinstance(variant, MonthlyPolicy):
        return _next_monthly(variant, after)

    expression = variant.to_cron_expression()
    # croniter ignores sub-minute precision of the start time.
    start = after.replace(second=0, microsecond=0)
    next_fire = croniter(expression, start).get_next(datetime)
    if next_fire <= after:
        next_fire = croniter(expression, next_fire).get_next(datetime)
    logger.debug("next fire for %s after %s: %s", expression, after, next_fire)
    return next_fire


def fires_between(
    policy: RecurrencePolicy | SchedulePolicySpec | SchedulePolicy,
    start: datetime,
    end: datetime,
) -> list[datetime]:
    """All fire times in ``(start, end]``, oldest first."""
    fires: list[datetime] = []
    current = start
    while True:
        current = next_eligible_fire(policy, current)
        if current > end:
            return fires
        fires.append(current)


def missed_by(scheduled_at: datetime, now: datetime) -> timedelta:
    """How late a fire would start if started at ``now`` (never negative)."""
    return max(now - scheduled_at, timedelta(0))
