"""Tests for backup schedule spec, status and record."""

from datetime import datetime, timedelta

import pytest

from backup_spine.core.enums import ConcurrencyPolicy, ExecutionStatus, ReclaimPolicy, ScheduleStatus
from backup_spine.core.errors import RangeError, ValidationError
from backup_spine.core.result import OK
from backup_spine.schedule.history import StatusInfo
from backup_spine.schedule.models import BackupSchedule, BackupScheduleSpec, BackupScheduleStatus


class TestBackupScheduleSpec:
    def test_defaults(self):
        spec = BackupScheduleSpec()
        assert spec.reclaim_policy is ReclaimPolicy.RETAIN
        assert spec.concurrency_policy is ConcurrencyPolicy.FORBID
        assert spec.enabled is True
        assert spec.max_retries_on_failure == 3
        assert spec.manual_only is True
        assert spec.validate() == OK

    @pytest.mark.parametrize("retries", [1, 5])
    def test_retry_bounds(self, retries):
        assert BackupScheduleSpec(max_retries_on_failure=retries).validate() == OK

    @pytest.mark.parametrize("retries", [0, 6, -1, True])
    def test_retries_out_of_range(self, retries):
        result = BackupScheduleSpec(max_retries_on_failure=retries).validate()
        assert isinstance(result.error, RangeError)
        assert result.error.field == "maxRetriesOnFailure"

    def test_negative_deadline(self):
        result = BackupScheduleSpec(starting_deadline=timedelta(seconds=-1)).validate()
        assert result.error.field == "startingDeadlineSeconds"

    def test_unknown_concurrency_policy(self):
        result = BackupScheduleSpec(concurrency_policy="Replace").validate()
        assert type(result.error) is ValidationError

    def test_check_raises(self):
        with pytest.raises(RangeError):
            BackupScheduleSpec(max_retries_on_failure=9).check()


class TestBackupScheduleStatus:
    """last_* fields are derived from the newest history entry."""

    def test_empty(self):
        status = BackupScheduleStatus()
        assert status.sched_status is ScheduleStatus.PENDING
        assert status.last_backup_name is None
        assert status.last_execution_status is None

    def test_derived_from_latest(self):
        status = BackupScheduleStatus()
        start = datetime(2024, 1, 15, 1, 30)
        status.recent_status_info.add(
            StatusInfo("db-1", start, ExecutionStatus.SUCCESS, start + timedelta(minutes=5))
        )
        assert status.last_backup_name == "db-1"
        assert status.last_execution_status is ExecutionStatus.SUCCESS
        assert status.last_start_timestamp == start
        assert status.last_completion_timestamp == start + timedelta(minutes=5)


class TestBackupSchedule:
    def test_validation_error_names_schedule(self):
        schedule = BackupSchedule("db", BackupScheduleSpec(max_retries_on_failure=0))
        assert schedule.validate().error.context.schedule == "db"

    def test_deleting(self):
        schedule = BackupSchedule("db")
        assert not schedule.deleting
        schedule.status.sched_status = ScheduleStatus.DELETING
        assert schedule.deleting


class TestSettingsDefaults:
    """Defaults not set on a schedule come from BackupSpineSettings."""

    def test_retry_budget_from_env(self, monkeypatch):
        monkeypatch.setenv("BACKUP_SPINE_DEFAULT_MAX_RETRIES", "5")
        assert BackupScheduleSpec().max_retries_on_failure == 5

    def test_history_capacity_from_env(self, monkeypatch):
        monkeypatch.setenv("BACKUP_SPINE_HISTORY_LIMIT", "4")
        assert BackupScheduleStatus().recent_status_info.capacity == 4
