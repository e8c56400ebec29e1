"""
Timestamp utilities (stdlib-only).

Status timestamps are stored as datetimes and serialized as ISO 8601
strings on the wire. An unset timestamp serializes as ``None``.

STDLIB ONLY - NO PYDANTIC.
"""

from datetime import datetime, tzinfo


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


def local_now(tz: tzinfo | None = None) -> datetime:
    """Current wall-clock time; naive local time unless ``tz`` is given."""
    return datetime.now(tz)
