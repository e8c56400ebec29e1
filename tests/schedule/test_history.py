"""Tests for the bounded run history."""

from datetime import datetime, timedelta

import pytest

from backup_spine.core.enums import ExecutionStatus
from backup_spine.schedule.history import RunHistory, StatusInfo


def _info(name: str, minute: int) -> StatusInfo:
    return StatusInfo(backup_name=name, start_timestamp=datetime(2024, 1, 15, 1, 0) + timedelta(minutes=minute))


class TestRunHistoryCapacity:
    """The history never holds more than its capacity."""

    def test_eleven_inserts_keep_last_ten(self):
        history = RunHistory(10)
        for i in range(11):
            history.add(_info(f"b{i}", i))
        assert len(history) == 10
        assert [e.backup_name for e in history] == [f"b{i}" for i in range(1, 11)]
        assert history.latest.backup_name == "b10"

    def test_add_returns_evicted_oldest(self):
        history = RunHistory(2)
        assert history.add(_info("a", 0)) is None
        assert history.add(_info("b", 1)) is None
        evicted = history.add(_info("c", 2))
        assert evicted.backup_name == "a"
        assert history.oldest.backup_name == "b"

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            RunHistory(0)

    def test_initial_entries_respect_capacity(self):
        history = RunHistory(2, [_info("a", 0), _info("b", 1), _info("c", 2)])
        assert [e.backup_name for e in history] == ["b", "c"]


class TestRunHistoryOrdering:
    def test_out_of_order_insert_sorted_by_start(self):
        history = RunHistory(5)
        history.add(_info("late", 10))
        history.add(_info("early", 1))
        assert [e.backup_name for e in history] == ["early", "late"]
        assert history.latest.backup_name == "late"

    def test_equal_start_keeps_insertion_order(self):
        history = RunHistory(5)
        history.add(_info("first", 3))
        history.add(_info("second", 3))
        assert history.latest.backup_name == "second"


class TestRunHistoryLookup:
    def test_empty(self):
        history = RunHistory()
        assert history.latest is None
        assert history.oldest is None
        assert history.capacity == 10

    def test_find_returns_newest_match(self):
        history = RunHistory(5)
        history.add(_info("x", 0))
        newer = _info("x", 5)
        history.add(newer)
        assert history.find("x") is newer
        assert history.find("missing") is None

    def test_in_progress(self):
        history = RunHistory(5)
        done = _info("done", 0)
        done.exec_status = ExecutionStatus.SUCCESS
        history.add(done)
        running = _info("running", 1)
        history.add(running)
        assert history.in_progress() == [running]

    def test_getitem(self):
        history = RunHistory(5, [_info("a", 0), _info("b", 1)])
        assert history[0].backup_name == "a"
        assert history[-1].backup_name == "b"
