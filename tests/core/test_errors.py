"""Tests for backup_spine.core.errors module."""

import pytest

from backup_spine.core.errors import (
    BackupSpineError,
    ConflictError,
    DuplicateValueError,
    ErrorCategory,
    ErrorContext,
    FormatError,
    InvalidTokenError,
    InvalidTransitionError,
    NotFoundError,
    PolicyInUseError,
    PolicyNotFoundError,
    RangeError,
    ScheduleError,
    ValidationError,
    VariantError,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.policy is None
        assert ctx.metadata == {}

    def test_to_dict_includes_set_fields(self):
        """to_dict includes only non-None fields."""
        ctx = ErrorContext(policy="nightly", metadata={"key": "value"})
        d = ctx.to_dict()
        assert d == {"policy": "nightly", "key": "value"}


class TestBackupSpineError:
    """Test the base error."""

    def test_defaults(self):
        error = BackupSpineError("boom")
        assert error.message == "boom"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False

    def test_with_context_known_and_extra_keys(self):
        error = BackupSpineError("boom").with_context(schedule="db", region="eu")
        assert error.context.schedule == "db"
        assert error.context.metadata["region"] == "eu"

    def test_cause_is_chained(self):
        cause = KeyError("x")
        error = BackupSpineError("wrapped", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == str(cause)

    def test_repr(self):
        assert repr(ScheduleError("x")) == "ScheduleError('x', category=ORCHESTRATION)"


class TestValidationErrors:
    """Validation error taxonomy."""

    @pytest.mark.parametrize(
        "cls", [FormatError, RangeError, InvalidTokenError, DuplicateValueError, VariantError]
    )
    def test_subclasses_are_validation_errors(self, cls):
        assert issubclass(cls, ValidationError)

    def test_never_retryable(self):
        error = RangeError("bad", field="minutes", values=[60])
        assert error.category == ErrorCategory.VALIDATION
        assert error.retryable is False

    def test_format_error_carries_reason_and_value(self):
        error = FormatError("hour out of range", "25:00")
        assert error.reason == "hour out of range"
        assert error.offending_value == "25:00"
        assert error.values == ["25:00"]
        assert "25:00" in str(error)

    def test_to_dict_lists_all_values(self):
        error = InvalidTokenError("bad days", field="days", values=["Mun", "Tus"])
        d = error.to_dict()
        assert d["error_type"] == "InvalidTokenError"
        assert d["field"] == "days"
        assert d["values"] == ["Mun", "Tus"]

    def test_duplicate_groups_in_dict(self):
        error = DuplicateValueError("dup", field="days", values=["Monday"], groups={"Mon": ["Monday"]})
        assert error.to_dict()["groups"] == {"Mon": ["Monday"]}

    def test_equality_ignores_identity(self):
        a = RangeError("bad", field="dates", values=[32])
        b = RangeError("bad", field="dates", values=[32])
        assert a == b
        assert a != DuplicateValueError("bad", field="dates", values=[32])


class TestScheduleAndResourceErrors:
    def test_invalid_transition_message(self):
        error = InvalidTransitionError("schedule", "Deleting", "Active")
        assert str(error) == "invalid schedule transition: Deleting -> Active"

    def test_policy_not_found_is_config(self):
        error = PolicyNotFoundError("nightly")
        assert error.category == ErrorCategory.CONFIG
        assert isinstance(error, ScheduleError)

    def test_policy_in_use_lists_schedules(self):
        error = PolicyInUseError("nightly", ["a", "b"])
        assert error.schedules == ["a", "b"]
        assert "a, b" in str(error)

    def test_resource_errors(self):
        assert NotFoundError("schedule policy", "x").category == ErrorCategory.STORAGE
        assert ConflictError("exists").category == ErrorCategory.STORAGE
