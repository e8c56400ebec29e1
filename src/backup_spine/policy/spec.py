"""Schedule policy spec: one recurrence kind per policy.

The wire form carries four optional keys (``hourly``, ``daily``,
``weekly``, ``monthly``). :meth:`SchedulePolicySpec.from_fields` reconciles
them into a single tagged variant and rejects a spec that populates none
or several.
"""

from __future__ import annotations

from dataclasses import dataclass

from backup_spine.core.enums import PolicyKind
from backup_spine.core.errors import VariantError
from backup_spine.core.result import Result
from backup_spine.policy.variants import (
    DailyPolicy,
    HourlyPolicy,
    MonthlyPolicy,
    RecurrencePolicy,
    WeeklyPolicy,
)

_VARIANT_TYPES: dict[PolicyKind, type] = {
    PolicyKind.HOURLY: HourlyPolicy,
    PolicyKind.DAILY: DailyPolicy,
    PolicyKind.WEEKLY: WeeklyPolicy,
    PolicyKind.MONTHLY: MonthlyPolicy,
}


@dataclass(frozen=True)
class SchedulePolicySpec:
    """Exactly one recurrence policy, tagged by its kind."""

    policy: RecurrencePolicy

    def __post_init__(self) -> None:
        if not isinstance(self.policy, tuple(_VARIANT_TYPES.values())):
            raise VariantError(
                f"unsupported recurrence policy: {type(self.policy).__name__}",
                field="spec",
            )

    @classmethod
    def from_fields(
        cls,
        hourly: HourlyPolicy | None = None,
        daily: DailyPolicy | None = None,
        weekly: WeeklyPolicy | None = None,
        monthly: MonthlyPolicy | None = None,
    ) -> SchedulePolicySpec:
        """Build from the four optional wire fields.

        Raises:
            VariantError: when zero or more than one field is set.
        """
        given = {
            PolicyKind.HOURLY: hourly,
            PolicyKind.DAILY: daily,
            PolicyKind.WEEKLY: weekly,
            PolicyKind.MONTHLY: monthly,
        }
        populated = [kind for kind, value in given.items() if value is not None]
        if len(populated) != 1:
            names = [kind.value for kind in populated]
            raise VariantError(
                "exactly one of hourly, daily, weekly, monthly must be set, "
                f"got {len(populated)}: {names}",
                field="spec",
                values=names,
            )
        policy = given[populated[0]]
        expected = _VARIANT_TYPES[populated[0]]
        if not isinstance(policy, expected):
            raise VariantError(
                f"{populated[0].value} expects {expected.__name__}, got {type(policy).__name__}",
                field=populated[0].value,
            )
        return cls(policy)

    @property
    def kind(self) -> PolicyKind:
        return self.policy.kind

    @property
    def hourly(self) -> HourlyPolicy | None:
        return self.policy if isinstance(self.policy, HourlyPolicy) else None

    @property
    def daily(self) -> DailyPolicy | None:
        return self.policy if isinstance(self.policy, DailyPolicy) else None

    @property
    def weekly(self) -> WeeklyPolicy | None:
        return self.policy if isinstance(self.policy, WeeklyPolicy) else None

    @property
    def monthly(self) -> MonthlyPolicy | None:
        return self.policy if isinstance(self.policy, MonthlyPolicy) else None

    @property
    def max_copies(self) -> int:
        return self.policy.max_copies

    def validate(self) -> Result[None]:
        return self.policy.validate()

    def check(self) -> None:
        self.policy.check()


@dataclass
class SchedulePolicy:
    """Named, versioned schedule policy record."""

    name: str
    spec: SchedulePolicySpec
    version: int = 1

    @property
    def kind(self) -> PolicyKind:
        return self.spec.kind

    def validate(self) -> Result[None]:
        """Validate the recurrence; a failure carries this policy's name as context."""
        result = self.spec.validate()
        if result.is_err():
            result.error.with_context(policy=self.name)
        return result
