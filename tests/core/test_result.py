"""Tests for backup_spine.core.result module."""

import pytest

from backup_spine.core.errors import RangeError
from backup_spine.core.result import OK, Err, Ok


class TestOk:
    """Test Ok class."""

    def test_create_ok(self):
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self):
        assert Ok("hello").unwrap() == "hello"
        assert Ok(10).unwrap_or(99) == 10

    def test_map_and_then(self):
        assert Ok(5).map(lambda x: x * 2).unwrap() == 10
        assert Ok(5).and_then(lambda x: Err(ValueError(str(x)))).is_err()

    def test_ok_constant(self):
        assert OK == Ok(None)
        assert OK.to_dict() == {"ok": True, "value": None}


class TestErr:
    """Test Err class."""

    def test_unwrap_raises_carried_error(self):
        error = RangeError("out of range", field="minutes", values=[60])
        with pytest.raises(RangeError) as exc_info:
            Err(error).unwrap()
        assert exc_info.value is error

    def test_unwrap_or(self):
        assert Err(ValueError("x")).unwrap_or("default") == "default"

    def test_map_passes_error_through(self):
        error = ValueError("x")
        assert Err(error).map(lambda v: v).error is error
        assert Err(error).and_then(lambda v: Ok(v)).error is error

    def test_to_dict_for_spine_error(self):
        d = Err(RangeError("bad", field="dates", values=[32])).to_dict()
        assert d["ok"] is False
        assert d["error"]["values"] == [32]

    def test_to_dict_for_plain_error(self):
        d = Err(ValueError("bad")).to_dict()
        assert d["error"] == {"error_type": "ValueError", "message": "bad"}

    def test_equal_payloads_compare_equal(self):
        assert Err(RangeError("bad", values=[1])) == Err(RangeError("bad", values=[1]))
