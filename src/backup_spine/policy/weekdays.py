"""Day-of-week normalization for weekly policies.

Maps human day tokens ("Monday", "mon", "Thurs") to a canonical
:class:`Weekday`. Lookup is case-insensitive; surrounding whitespace is
not stripped.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType


class Weekday(IntEnum):
    """Canonical weekday; values match :meth:`datetime.date.weekday`."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def abbreviation(self) -> str:
        return _ABBREVIATIONS[self]

    @property
    def cron_number(self) -> int:
        """Day number in cron's day-of-week field (Sunday is 0)."""
        return (self.value + 1) % 7


DAY_TOKENS: MappingProxyType[str, Weekday] = MappingProxyType({
    "sunday": Weekday.SUNDAY,
    "sun": Weekday.SUNDAY,
    "monday": Weekday.MONDAY,
    "mon": Weekday.MONDAY,
    "tuesday": Weekday.TUESDAY,
    "tue": Weekday.TUESDAY,
    "wednesday": Weekday.WEDNESDAY,
    "wed": Weekday.WEDNESDAY,
    "thursday": Weekday.THURSDAY,
    "thurs": Weekday.THURSDAY,
    "friday": Weekday.FRIDAY,
    "fri": Weekday.FRIDAY,
    "saturday": Weekday.SATURDAY,
    "sat": Weekday.SATURDAY,
})

_ABBREVIATIONS = MappingProxyType({
    Weekday.MONDAY: "Mon",
    Weekday.TUESDAY: "Tue",
    Weekday.WEDNESDAY: "Wed",
    Weekday.THURSDAY: "Thurs",
    Weekday.FRIDAY: "Fri",
    Weekday.SATURDAY: "Sat",
    Weekday.SUNDAY: "Sun",
})

ACCEPTED_TOKENS = (
    "Sunday, Sun, Monday, Mon, Tuesday, Tue, Wednesday, Wed, "
    "Thursday, Thurs, Friday, Fri, Saturday, Sat"
)


def lookup_day(token: object) -> Weekday | None:
    """Return the weekday for ``token``, or None if it is not recognized."""
    if not isinstance(token, str):
        return None
    return DAY_TOKENS.get(token.lower())


def normalize_day(token: str) -> Weekday:
    """Return the weekday for ``token``; raise KeyError if unrecognized."""
    day = lookup_day(token)
    if day is None:
        raise KeyError(token)
    return day
