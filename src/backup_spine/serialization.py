"""Wire format for policies and schedules.

Field names below are the stable contract consumers rely on::

    SchedulePolicy   {"name", "version", "spec": {"hourly"|"daily"|"weekly"|"monthly": {...}}}
        hourly       {"minutes", "maxCopies"}
        daily        {"time", "maxCopies"}
        weekly       {"days", "time", "maxCopies"}
        monthly      {"dates", "time", "maxCopies"}

    BackupSchedule   {"name", "version", "spec", "status"}
        spec         {"backupPolicyName", "reclaimPolicy", "enable",
                      "maxRetriesOnFailure", "startingDeadlineSeconds",
                      "concurrentPolicy", "template"}
        status       {"recentStatusInfo", "lastBackupName", "lastExecutionStatus",
                      "lastStartTimestamp", "lastCompletionTimestamp",
                      "schedStatus", "backupStatus"}
        entry        {"backupName", "execStatus", "startTimestamp",
                      "completionTimestamp"}

``reclaimPolicy`` is an object with one key, ``reclaimPolicyDelete`` or
``reclaimPolicyRetain``. Omitted optional fields take the API defaults.

Decoding goes through the pydantic ``*Wire`` models, which check shape and
coerce scalars (``"false"`` -> ``False``, ``"30"`` -> ``30``); policy
semantics stay with ``validate()``. Any pydantic failure surfaces as
:class:`~backup_spine.core.errors.ValidationError`.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from backup_spine.core.enums import (
    ConcurrencyPolicy,
    ExecutionStatus,
    ReclaimPolicy,
    ScheduleStatus,
)
from backup_spine.core.errors import ValidationError
from backup_spine.core.settings import get_settings
from backup_spine.core.timestamps import to_iso8601
from backup_spine.policy.spec import SchedulePolicy, SchedulePolicySpec
from backup_spine.policy.variants import (
    DEFAULT_DAILY_COPIES,
    DEFAULT_HOURLY_COPIES,
    DEFAULT_MONTHLY_COPIES,
    DEFAULT_WEEKLY_COPIES,
    DailyPolicy,
    HourlyPolicy,
    MonthlyPolicy,
    RecurrencePolicy,
    WeeklyPolicy,
)
from backup_spine.schedule.history import RunHistory, StatusInfo
from backup_spine.schedule.models import BackupSchedule, BackupScheduleSpec, BackupScheduleStatus

_RECLAIM_KEYS = {
    ReclaimPolicy.DELETE: "reclaimPolicyDelete",
    ReclaimPolicy.RETAIN: "reclaimPolicyRetain",
}


def _decode(model: type[BaseModel], data: Any, where: str) -> Any:
    """Validate ``data`` against ``model``, re-raising as our ValidationError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors()
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or where}: {err['msg']}" for err in errors
        )
        loc = errors[0]["loc"] if errors else ()
        raise ValidationError(
            f"invalid {where}: {details}",
            field=str(loc[-1]) if loc else where,
            values=[err.get("input") for err in errors if err["type"] != "missing"],
            cause=exc,
        ) from exc


# ---------------------------------------------------------------------------
# WIRE MODELS
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class HourlyWire(_WireModel):
    minutes: int
    max_copies: int = Field(default=DEFAULT_HOURLY_COPIES, alias="maxCopies")

    def to_policy(self) -> HourlyPolicy:
        return HourlyPolicy(minutes=self.minutes, max_copies=self.max_copies)


class DailyWire(_WireModel):
    time: str
    max_copies: int = Field(default=DEFAULT_DAILY_COPIES, alias="maxCopies")

    def to_policy(self) -> DailyPolicy:
        return DailyPolicy(time=self.time, max_copies=self.max_copies)


class WeeklyWire(_WireModel):
    days: list[str]
    time: str
    max_copies: int = Field(default=DEFAULT_WEEKLY_COPIES, alias="maxCopies")

    def to_policy(self) -> WeeklyPolicy:
        return WeeklyPolicy(days=self.days, time=self.time, max_copies=self.max_copies)


class MonthlyWire(_WireModel):
    dates: list[int]
    time: str
    max_copies: int = Field(default=DEFAULT_MONTHLY_COPIES, alias="maxCopies")

    def to_policy(self) -> MonthlyPolicy:
        return MonthlyPolicy(dates=self.dates, time=self.time, max_copies=self.max_copies)


class PolicySpecWire(_WireModel):
    """The four optional recurrence fields of a policy ``spec``."""

    hourly: HourlyWire | None = None
    daily: DailyWire | None = None
    weekly: WeeklyWire | None = None
    monthly: MonthlyWire | None = None

    def to_spec(self) -> SchedulePolicySpec:
        """Raises VariantError unless exactly one field is set."""
        return SchedulePolicySpec.from_fields(
            hourly=self.hourly.to_policy() if self.hourly else None,
            daily=self.daily.to_policy() if self.daily else None,
            weekly=self.weekly.to_policy() if self.weekly else None,
            monthly=self.monthly.to_policy() if self.monthly else None,
        )


class SchedulePolicyWire(_WireModel):
    name: str = Field(..., min_length=1, description="Policy name")
    version: int = Field(default=1, ge=1)
    spec: PolicySpecWire

    def to_policy(self) -> SchedulePolicy:
        return SchedulePolicy(name=self.name, spec=self.spec.to_spec(), version=self.version)


class ScheduleSpecWire(_WireModel):
    """
    Desired state of a backup schedule.

    ``null`` and empty values fall back to the defaults; an omitted
    ``maxRetriesOnFailure`` takes ``BackupSpineSettings.default_max_retries``.
    """

    backup_policy_name: str | None = Field(default=None, alias="backupPolicyName")
    reclaim_policy: ReclaimPolicy = Field(default=ReclaimPolicy.RETAIN, alias="reclaimPolicy")
    enable: bool = True
    max_retries_on_failure: int | None = Field(default=None, alias="maxRetriesOnFailure")
    starting_deadline_seconds: int | None = Field(default=None, alias="startingDeadlineSeconds")
    concurrent_policy: ConcurrencyPolicy = Field(default=ConcurrencyPolicy.FORBID, alias="concurrentPolicy")
    template: dict[str, Any] = Field(default_factory=dict)

    @field_validator("reclaim_policy", mode="before")
    @classmethod
    def reclaim_from_object(cls, v: Any) -> Any:
        if v is None or v == {}:
            return ReclaimPolicy.RETAIN
        if not isinstance(v, dict):
            return v
        chosen = [policy for policy, key in _RECLAIM_KEYS.items() if v.get(key)]
        if len(chosen) != 1 or set(v) - set(_RECLAIM_KEYS.values()):
            raise ValueError("must set exactly one of reclaimPolicyDelete, reclaimPolicyRetain")
        return chosen[0]

    @field_validator("enable", mode="before")
    @classmethod
    def enable_default(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("concurrent_policy", mode="before")
    @classmethod
    def concurrent_default(cls, v: Any) -> Any:
        return ConcurrencyPolicy.FORBID if v in (None, "") else v

    @field_validator("template", mode="before")
    @classmethod
    def template_default(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_spec(self) -> BackupScheduleSpec:
        kwargs: dict[str, Any] = {}
        if self.max_retries_on_failure is not None:
            kwargs["max_retries_on_failure"] = self.max_retries_on_failure
        deadline = self.starting_deadline_seconds
        return BackupScheduleSpec(
            recurrence_policy_ref=self.backup_policy_name or None,
            reclaim_policy=self.reclaim_policy,
            enabled=self.enable,
            starting_deadline=timedelta(seconds=deadline) if deadline is not None else None,
            concurrency_policy=self.concurrent_policy,
            backup_template=dict(self.template),
            **kwargs,
        )


class StatusInfoWire(_WireModel):
    backup_name: str = Field(..., alias="backupName")
    exec_status: ExecutionStatus = Field(..., alias="execStatus")
    start_timestamp: datetime = Field(..., alias="startTimestamp")
    completion_timestamp: datetime | None = Field(default=None, alias="completionTimestamp")

    @field_validator("completion_timestamp", mode="before")
    @classmethod
    def empty_is_unset(cls, v: Any) -> Any:
        return None if v == "" else v

    def to_status_info(self) -> StatusInfo:
        return StatusInfo(
            backup_name=self.backup_name,
            start_timestamp=self.start_timestamp,
            exec_status=self.exec_status,
            completion_timestamp=self.completion_timestamp,
        )


class ScheduleStatusWire(_WireModel):
    """Observed state; the ``last*`` fields are derived on encode and ignored here."""

    model_config = ConfigDict(extra="ignore")

    recent_status_info: list[StatusInfoWire] = Field(default_factory=list, alias="recentStatusInfo")
    sched_status: ScheduleStatus = Field(default=ScheduleStatus.PENDING, alias="schedStatus")
    backup_status: Any = Field(default=None, alias="backupStatus")

    @field_validator("recent_status_info", mode="before")
    @classmethod
    def history_default(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("sched_status", mode="before")
    @classmethod
    def sched_status_default(cls, v: Any) -> Any:
        return ScheduleStatus.PENDING if v in (None, "") else v

    def to_status(self, history_limit: int | None = None) -> BackupScheduleStatus:
        entries = [entry.to_status_info() for entry in self.recent_status_info]
        return BackupScheduleStatus(
            recent_status_info=RunHistory(history_limit or get_settings().history_limit, entries),
            sched_status=self.sched_status,
            backup_status=self.backup_status,
        )


class BackupScheduleWire(_WireModel):
    name: str = Field(..., min_length=1, description="Schedule name")
    version: int = Field(default=1, ge=1)
    spec: ScheduleSpecWire = Field(default_factory=ScheduleSpecWire)
    status: ScheduleStatusWire = Field(default_factory=ScheduleStatusWire)

    @field_validator("spec", "status", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_schedule(self, history_limit: int | None = None) -> BackupSchedule:
        return BackupSchedule(
            name=self.name,
            spec=self.spec.to_spec(),
            status=self.status.to_status(history_limit),
            version=self.version,
        )


# ---------------------------------------------------------------------------
# policies
# ---------------------------------------------------------------------------


def policy_to_dict(policy: RecurrencePolicy) -> dict[str, Any]:
    """Encode a single recurrence variant (without its kind key)."""
    if isinstance(policy, HourlyPolicy):
        return {"minutes": policy.minutes, "maxCopies": policy.max_copies}
    if isinstance(policy, DailyPolicy):
        return {"time": policy.time, "maxCopies": policy.max_copies}
    if isinstance(policy, WeeklyPolicy):
        return {"days": list(policy.days), "time": policy.time, "maxCopies": policy.max_copies}
    return {"dates": list(policy.dates), "time": policy.time, "maxCopies": policy.max_copies}


def policy_spec_to_dict(spec: SchedulePolicySpec) -> dict[str, Any]:
    return {spec.kind.value: policy_to_dict(spec.policy)}


def policy_spec_from_dict(data: dict[str, Any]) -> SchedulePolicySpec:
    """Decode a ``spec`` object; exactly one kind key must be present.

    Raises:
        VariantError: zero or several kind keys.
        ValidationError: a required field is missing or has the wrong shape.
    """
    return _decode(PolicySpecWire, data, "spec").to_spec()


def schedule_policy_to_dict(policy: SchedulePolicy) -> dict[str, Any]:
    return {"name": policy.name, "version": policy.version, "spec": policy_spec_to_dict(policy.spec)}


def schedule_policy_from_dict(data: dict[str, Any]) -> SchedulePolicy:
    return _decode(SchedulePolicyWire, data, "schedulePolicy").to_policy()


# ---------------------------------------------------------------------------
# schedules
# ---------------------------------------------------------------------------


def schedule_spec_to_dict(spec: BackupScheduleSpec) -> dict[str, Any]:
    result: dict[str, Any] = {
        "backupPolicyName": spec.recurrence_policy_ref or "",
        "reclaimPolicy": {_RECLAIM_KEYS[spec.reclaim_policy]: spec.reclaim_policy.value},
        "enable": spec.enabled,
        "maxRetriesOnFailure": spec.max_retries_on_failure,
        "concurrentPolicy": spec.concurrency_policy.value,
        "template": dict(spec.backup_template),
    }
    if spec.starting_deadline is not None:
        result["startingDeadlineSeconds"] = int(spec.starting_deadline.total_seconds())
    return result


def schedule_spec_from_dict(data: dict[str, Any]) -> BackupScheduleSpec:
    return _decode(ScheduleSpecWire, data, "spec").to_spec()


def status_info_to_dict(entry: StatusInfo) -> dict[str, Any]:
    return {
        "backupName": entry.backup_name,
        "execStatus": entry.exec_status.value,
        "startTimestamp": to_iso8601(entry.start_timestamp),
        "completionTimestamp": to_iso8601(entry.completion_timestamp),
    }


def status_info_from_dict(data: dict[str, Any]) -> StatusInfo:
    return _decode(StatusInfoWire, data, "statusInfo").to_status_info()


def schedule_status_to_dict(status: BackupScheduleStatus) -> dict[str, Any]:
    last_status = status.last_execution_status
    return {
        "recentStatusInfo": [status_info_to_dict(e) for e in status.recent_status_info],
        "lastBackupName": status.last_backup_name or "",
        "lastExecutionStatus": last_status.value if last_status else "",
        "lastStartTimestamp": to_iso8601(status.last_start_timestamp),
        "lastCompletionTimestamp": to_iso8601(status.last_completion_timestamp),
        "schedStatus": status.sched_status.value,
        "backupStatus": status.backup_status,
    }


def schedule_status_from_dict(data: dict[str, Any], history_limit: int | None = None) -> BackupScheduleStatus:
    """Decode a status; the ``last*`` fields are derived, not read."""
    return _decode(ScheduleStatusWire, data, "status").to_status(history_limit)


def backup_schedule_to_dict(schedule: BackupSchedule) -> dict[str, Any]:
    return {
        "name": schedule.name,
        "version": schedule.version,
        "spec": schedule_spec_to_dict(schedule.spec),
        "status": schedule_status_to_dict(schedule.status),
    }


def backup_schedule_from_dict(data: dict[str, Any], history_limit: int | None = None) -> BackupSchedule:
    return _decode(BackupScheduleWire, data, "backupSchedule").to_schedule(history_limit)


__all__ = [
    "HourlyWire",
    "DailyWire",
    "WeeklyWire",
    "MonthlyWire",
    "PolicySpecWire",
    "SchedulePolicyWire",
    "ScheduleSpecWire",
    "StatusInfoWire",
    "ScheduleStatusWire",
    "BackupScheduleWire",
    "policy_to_dict",
    "policy_spec_to_dict",
    "policy_spec_from_dict",
    "schedule_policy_to_dict",
    "schedule_policy_from_dict",
    "schedule_spec_to_dict",
    "schedule_spec_from_dict",
    "status_info_to_dict",
    "status_info_from_dict",
    "schedule_status_to_dict",
    "schedule_status_from_dict",
    "backup_schedule_to_dict",
    "backup_schedule_from_dict",
]
