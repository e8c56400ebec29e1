"""Tests for SchedulePolicySpec and SchedulePolicy."""

import pytest

from backup_spine.core.enums import PolicyKind
from backup_spine.core.errors import RangeError, VariantError
from backup_spine.core.result import OK
from backup_spine.policy.spec import SchedulePolicy, SchedulePolicySpec
from backup_spine.policy.variants import DailyPolicy, HourlyPolicy, MonthlyPolicy, WeeklyPolicy


class TestFromFields:
    """Exactly one of the four variant fields must be set."""

    def test_single_field(self):
        spec = SchedulePolicySpec.from_fields(daily=DailyPolicy(time="01:30"))
        assert spec.kind is PolicyKind.DAILY
        assert spec.daily == DailyPolicy(time="01:30")
        assert spec.hourly is None
        assert spec.weekly is None
        assert spec.monthly is None

    def test_none_set(self):
        with pytest.raises(VariantError) as exc_info:
            SchedulePolicySpec.from_fields()
        assert exc_info.value.values == []

    def test_two_set(self):
        with pytest.raises(VariantError) as exc_info:
            SchedulePolicySpec.from_fields(
                hourly=HourlyPolicy(minutes=5),
                monthly=MonthlyPolicy(dates=[1], time="00:00"),
            )
        assert exc_info.value.values == ["hourly", "monthly"]

    def test_wrong_type_for_field(self):
        with pytest.raises(VariantError):
            SchedulePolicySpec.from_fields(weekly=DailyPolicy(time="01:30"))

    def test_direct_construction_rejects_non_policy(self):
        with pytest.raises(VariantError):
            SchedulePolicySpec("daily")


class TestSchedulePolicySpec:
    def test_max_copies_follows_variant(self):
        spec = SchedulePolicySpec(WeeklyPolicy(days=["Mon"], time="10:00", max_copies=8))
        assert spec.max_copies == 8

    def test_validate_delegates(self):
        assert SchedulePolicySpec(HourlyPolicy(minutes=0)).validate() == OK
        assert SchedulePolicySpec(HourlyPolicy(minutes=60)).validate().is_err()

    def test_check_raises(self):
        with pytest.raises(RangeError):
            SchedulePolicySpec(HourlyPolicy(minutes=99)).check()


class TestSchedulePolicy:
    def test_kind(self):
        policy = SchedulePolicy("hourly-5", SchedulePolicySpec(HourlyPolicy(minutes=5)))
        assert policy.kind is PolicyKind.HOURLY
        assert policy.version == 1

    def test_validation_error_names_policy(self):
        policy = SchedulePolicy("bad", SchedulePolicySpec(MonthlyPolicy(dates=[32], time="10:00")))
        result = policy.validate()
        assert result.is_err()
        assert result.error.context.policy == "bad"
