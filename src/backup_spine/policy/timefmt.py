"""Time-of-day validation shared by every time-bearing policy.

A policy time is a 24-hour ``HH:MM`` string: two-digit hour 00-23, a
colon, two-digit minute 00-59, and nothing else.
"""

from __future__ import annotations

import re
from datetime import time

from backup_spine.core.errors import FormatError
from backup_spine.core.result import OK, Err, Result

TIME_LAYOUT = "HH:MM"

_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


def validate_time(value: object, *, field: str = "time") -> Result[None]:
    """Check ``value`` against the ``HH:MM`` layout.

    Args:
        value: Candidate time string
        field: Field name reported on failure

    Returns:
        ``Ok(None)`` when valid, ``Err(FormatError)`` otherwise.
    """
    if not isinstance(value, str):
        return Err(FormatError("time must be a string", repr(value), field=field))

    match = _TIME_RE.fullmatch(value)
    if match is None:
        return Err(FormatError(f"does not match layout {TIME_LAYOUT}", value, field=field))

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23:
        return Err(FormatError("hour out of range", value, field=field))
    if minute > 59:
        return Err(FormatError("minute out of range", value, field=field))
    return OK


def check_time_format(value: object, *, field: str = "time") -> None:
    """Raise :class:`FormatError` if ``value`` is not a valid ``HH:MM`` time."""
    validate_time(value, field=field).unwrap()


def parse_time(value: str) -> time:
    """Parse a validated ``HH:MM`` string into a :class:`datetime.time`."""
    check_time_format(value)
    hour, minute = value.split(":")
    return time(int(hour), int(minute))
