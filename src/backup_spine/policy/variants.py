"""Recurrence policy variants.

Manifesto:
    Each recurrence kind owns its validation contract. A policy is checked
    once, when it is created or updated, and every failure is reported with
    all offending values of its category so the operator can fix the whole
    policy in one edit.

Four kinds, one fire rule each (cron rendering in brackets):

    ======== ===================================== ==================
    Kind     Fires                                 Cron
    ======== ===================================== ==================
    hourly   every hour at ``minutes``             ``25 * * * *``
    daily    every day at ``time``                 ``20 16 * * *``
    weekly   at ``time`` on each of ``days``       ``25 11 * * 1,2``
    monthly  at ``time`` on each of ``dates``      ``25 11 1,5,18 * *``
    ======== ===================================== ==================

Validation order per kind:

    - daily: ``time`` format only.
    - weekly: ``time`` format first (short-circuits), then unknown day tokens,
      then duplicate days. All unknown tokens and all duplicates are
      collected; unknown tokens win when both occur.
    - monthly: ``time`` format first (short-circuits), then out-of-range
      dates. Any out-of-range date suppresses the duplicate check.

``max_copies`` is retention metadata. It is range-checked after the kind's
own checks and plays no other part in validation.

``dates`` semantics: a date missing from a month (31 in April, 30 in
February) rolls forward to the first day of the next month. The trigger
engine owns that computation; :func:`backup_spine.policy.triggers.next_eligible_fire`
is the reference implementation.

Tags:
    backup-spine, policy, validation, recurrence, dataclasses

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from backup_spine.core.enums import PolicyKind
from backup_spine.core.errors import (
    DuplicateValueError,
    InvalidTokenError,
    RangeError,
    ValidationError,
)
from backup_spine.core.result import OK, Err, Result
from backup_spine.policy.timefmt import parse_time, validate_time
from backup_spine.policy.weekdays import ACCEPTED_TOKENS, Weekday, lookup_day

MIN_COPIES = 1
MAX_COPIES = 256

DEFAULT_HOURLY_COPIES = 24
DEFAULT_DAILY_COPIES = 15
DEFAULT_WEEKLY_COPIES = 4
DEFAULT_MONTHLY_COPIES = 12

MIN_DATE = 1
MAX_DATE = 31


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_max_copies(value: object) -> Result[None]:
    if not _is_int(value) or not MIN_COPIES <= value <= MAX_COPIES:
        return Err(RangeError(
            f"maxCopies is {value!r}, you should provide a value in "
            f"[{MIN_COPIES},{MAX_COPIES}]",
            field="maxCopies",
            values=[value],
        ))
    return OK


# ---------------------------------------------------------------------------
# hourly
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HourlyPolicy:
    """Fires once an hour, ``minutes`` past the hour."""

    minutes: int
    max_copies: int = DEFAULT_HOURLY_COPIES

    kind = PolicyKind.HOURLY

    def validate(self) -> Result[None]:
        if not _is_int(self.minutes) or not 0 <= self.minutes <= 59:
            return Err(RangeError(
                f"minutes is {self.minutes!r}, in HourlyPolicy you should provide "
                "the minute of the hour in [0,59]",
                field="minutes",
                values=[self.minutes],
            ))
        return _check_max_copies(self.max_copies)

    def check(self) -> None:
        self.validate().unwrap()

    def to_cron_expression(self) -> str:
        self.check()
        return f"{self.minutes} * * * *"


# ---------------------------------------------------------------------------
# daily
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyPolicy:
    """Fires once a day at ``time``."""

    time: str
    max_copies: int = DEFAULT_DAILY_COPIES

    kind = PolicyKind.DAILY

    def validate(self) -> Result[None]:
        return validate_time(self.time).and_then(lambda _: _check_max_copies(self.max_copies))

    def check(self) -> None:
        self.validate().unwrap()

    def to_cron_expression(self) -> str:
        self.check()
        at = parse_time(self.time)
        return f"{at.minute} {at.hour} * * *"


# ---------------------------------------------------------------------------
# weekly
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WeeklyPolicy:
    """Fires at ``time`` on every listed day of the week."""

    days: Sequence[str]
    time: str
    max_copies: int = DEFAULT_WEEKLY_COPIES

    kind = PolicyKind.WEEKLY

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(self.days))

    def validate(self) -> Result[None]:
        time_check = validate_time(self.time)
        if time_check.is_err():
            return time_check

        if not self.days:
            return Err(ValidationError(
                "days is empty, in WeeklyPolicy you should provide at least one day",
                field="days",
            ))

        invalid: list[object] = []
        duplicates: list[str] = []
        first_seen: dict[Weekday, str] = {}
        groups: dict[str, list[str]] = {}

        for token in self.days:
            day = lookup_day(token)
            if day is None:
                invalid.append(token)
                continue
            if day in first_seen:
                duplicates.append(token)
                groups.setdefault(first_seen[day], []).append(token)
            else:
                first_seen[day] = token

        if invalid:
            return Err(InvalidTokenError(
                f"invalid day of the week: {invalid}, in WeeklyPolicy you should "
                f"provide the day as {ACCEPTED_TOKENS}",
                field="days",
                values=invalid,
            ))
        if duplicates:
            described = ", ".join(
                f"{dup!r} (same day as {first!r})"
                for first, dups in groups.items()
                for dup in dups
            )
            return Err(DuplicateValueError(
                f"duplicate day of the week: {described}, in WeeklyPolicy",
                field="days",
                values=duplicates,
                groups=groups,
            ))
        return _check_max_copies(self.max_copies)

    def check(self) -> None:
        self.validate().unwrap()

    def weekdays(self) -> tuple[Weekday, ...]:
        """Distinct weekdays of a valid policy, Monday first."""
        self.check()
        return tuple(sorted({lookup_day(token) for token in self.days}))

    def to_cron_expression(self) -> str:
        at = parse_time(self.time)
        numbers = sorted(day.cron_number for day in self.weekdays())
        return f"{at.minute} {at.hour} * * {','.join(str(n) for n in numbers)}"


# ---------------------------------------------------------------------------
# monthly
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthlyPolicy:
    """
    Fires at ``time`` on every listed date of the month.

    A date that a month lacks rolls forward to the 1st of the next month.
    """

    dates: Sequence[int]
    time: str
    max_copies: int = DEFAULT_MONTHLY_COPIES

    kind = PolicyKind.MONTHLY

    def __post_init__(self) -> None:
        object.__setattr__(self, "dates", tuple(self.dates))

    def validate(self) -> Result[None]:
        time_check = validate_time(self.time)
        if time_check.is_err():
            return time_check

        if not self.dates:
            return Err(ValidationError(
                "dates is empty, in MonthlyPolicy you should provide at least one date",
                field="dates",
            ))

        out_of_range = [
            date for date in self.dates
            if not _is_int(date) or not MIN_DATE <= date <= MAX_DATE
        ]
        if out_of_range:
            return Err(RangeError(
                f"invalid date of the month: {out_of_range}, in MonthlyPolicy you "
                f"should provide the date in [{MIN_DATE},{MAX_DATE}]",
                field="dates",
                values=out_of_range,
            ))

        seen: set[int] = set()
        duplicates: list[int] = []
        for date in self.dates:
            if date in seen:
                duplicates.append(date)
            else:
                seen.add(date)
        if duplicates:
            return Err(DuplicateValueError(
                f"duplicate date of the month: {duplicates}, in MonthlyPolicy",
                field="dates",
                values=duplicates,
                groups={date: [date] * duplicates.count(date) for date in dict.fromkeys(duplicates)},
            ))
        return _check_max_copies(self.max_copies)

    def check(self) -> None:
        self.validate().unwrap()

    def to_cron_expression(self) -> str:
        """Cron rendering; cron skips missing dates instead of rolling them over."""
        self.check()
        at = parse_time(self.time)
        return f"{at.minute} {at.hour} {','.join(str(d) for d in sorted(self.dates))} * *"


RecurrencePolicy = HourlyPolicy | DailyPolicy | WeeklyPolicy | MonthlyPolicy


__all__ = [
    "HourlyPolicy",
    "DailyPolicy",
    "WeeklyPolicy",
    "MonthlyPolicy",
    "RecurrencePolicy",
    "DEFAULT_HOURLY_COPIES",
    "DEFAULT_DAILY_COPIES",
    "DEFAULT_WEEKLY_COPIES",
    "DEFAULT_MONTHLY_COPIES",
]
