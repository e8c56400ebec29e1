"""Tests for HH:MM time validation."""

from datetime import time

import pytest

from backup_spine.core.errors import FormatError
from backup_spine.core.result import OK
from backup_spine.policy.timefmt import check_time_format, parse_time, validate_time


class TestValidateTime:
    """validate_time returns Ok or Err(FormatError)."""

    @pytest.mark.parametrize("value", ["00:00", "10:30", "23:59", "09:05"])
    def test_valid_times(self, value):
        assert validate_time(value) == OK

    @pytest.mark.parametrize(
        "value,reason",
        [
            ("25:00", "hour out of range"),
            ("24:00", "hour out of range"),
            ("10:60", "minute out of range"),
            ("1:30", "does not match layout HH:MM"),
            ("10:30:00", "does not match layout HH:MM"),
            ("", "does not match layout HH:MM"),
            (" 10:30", "does not match layout HH:MM"),
            ("ab:cd", "does not match layout HH:MM"),
        ],
    )
    def test_invalid_times(self, value, reason):
        result = validate_time(value)
        assert result.is_err()
        assert isinstance(result.error, FormatError)
        assert result.error.reason == reason
        assert result.error.offending_value == value

    def test_message_names_value_and_expected_format(self):
        error = validate_time("25:00").error
        assert "'25:00'" in error.message
        assert "00:00-23:59" in error.message

    def test_non_string_rejected(self):
        result = validate_time(1030)
        assert result.is_err()
        assert result.error.reason == "time must be a string"

    def test_field_name_is_reported(self):
        assert validate_time("99:99", field="startAt").error.field == "startAt"


class TestCheckAndParse:
    def test_check_raises(self):
        with pytest.raises(FormatError):
            check_time_format("7:00")

    def test_parse_time(self):
        assert parse_time("07:05") == time(7, 5)

    def test_parse_invalid_raises(self):
        with pytest.raises(FormatError):
            parse_time("23:60")
