"""Tests for backup_spine.core.timestamps."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from backup_spine.core.timestamps import local_now, to_iso8601


class TestLocalNow:
    def test_naive_by_default(self):
        assert local_now().tzinfo is None

    def test_keeps_given_tz(self):
        tz = timezone(timedelta(hours=2))
        assert local_now(tz).tzinfo is tz


class TestIso8601:
    def test_naive(self):
        assert to_iso8601(datetime(2024, 1, 15, 1, 30)) == "2024-01-15T01:30:00"

    def test_aware_keeps_offset(self):
        dt = datetime(2024, 1, 15, 1, 30, tzinfo=timezone.utc)
        assert to_iso8601(dt) == "2024-01-15T01:30:00+00:00"

    def test_none(self):
        assert to_iso8601(None) is None
