"""In-memory named, versioned records for policies and schedules.

Manifesto:
    Policies and schedules are named, versioned records with plain
    create/read/update/delete semantics. Admission rejects invalid specs
    up front, and a policy cannot be deleted while a schedule still
    references it.

Every write bumps ``version``. ``update`` accepts an ``expected_version``
for optimistic concurrency; a mismatch raises :class:`ConflictError`.

Tags:
    backup-spine, repository, CRUD, versioning

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from typing import Generic, Protocol, TypeVar

from backup_spine.core.errors import ConflictError, NotFoundError, PolicyInUseError
from backup_spine.core.settings import get_settings
from backup_spine.policy.spec import SchedulePolicy
from backup_spine.schedule.history import RunHistory
from backup_spine.schedule.models import BackupSchedule, BackupScheduleSpec, BackupScheduleStatus

logger = logging.getLogger(__name__)


class NamedRecord(Protocol):
    name: str
    version: int


R = TypeVar("R", bound=NamedRecord)


class RecordStore(Generic[R]):
    """Dictionary-backed store keyed by record name."""

    kind = "record"

    def __init__(self) -> None:
        self._records: dict[str, R] = {}

    def _admit(self, record: R) -> None:
        """Reject a record before it is written. Subclasses override."""

    def create(self, record: R) -> R:
        if record.name in self._records:
            raise ConflictError(f"{self.kind} already exists: {record.name}")
        self._admit(record)
        record.version = 1
        self._records[record.name] = record
        logger.info(f"Created {self.kind} {record.name}")
        return record

    def get(self, name: str) -> R:
        record = self._records.get(name)
        if record is None:
            raise NotFoundError(self.kind, name)
        return record

    def find(self, name: str | None) -> R | None:
        if not name:
            return None
        return self._records.get(name)

    def update(self, record: R, expected_version: int | None = None) -> R:
        current = self.get(record.name)
        if expected_version is not None and current.version != expected_version:
            raise ConflictError(
                f"{self.kind} {record.name} is at version {current.version}, "
                f"expected {expected_version}"
            )
        self._admit(record)
        record.version = current.version + 1
        self._records[record.name] = record
        logger.debug(f"Updated {self.kind} {record.name} to version {record.version}")
        return record

    def delete(self, name: str) -> R:
        record = self.get(name)
        del self._records[name]
        logger.info(f"Deleted {self.kind} {name}")
        return record

    def list(self) -> list[R]:
        return [self._records[name] for name in sorted(self._records)]

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[R]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._records)


class ScheduleStore(RecordStore[BackupSchedule]):
    """Backup schedules; specs are validated on admission."""

    kind = "backup schedule"

    def _admit(self, record: BackupSchedule) -> None:
        record.validate().unwrap()

    def referencing(self, policy_name: str) -> list[str]:
        """Names of schedules whose recurrence policy is ``policy_name``."""
        return [s.name for s in self.list() if s.spec.recurrence_policy_ref == policy_name]


class PolicyStore(RecordStore[SchedulePolicy]):
    """Schedule policies; invalid policies are rejected on admission."""

    kind = "schedule policy"

    def __init__(self, schedules: ScheduleStore | None = None) -> None:
        super().__init__()
        self._schedules = schedules

    def _admit(self, record: SchedulePolicy) -> None:
        record.validate().unwrap()

    def delete(self, name: str) -> SchedulePolicy:
        if self._schedules is not None:
            users = self._schedules.referencing(name)
            if users:
                raise PolicyInUseError(name, users)
        return super().delete(name)


class Catalog:
    """Policies and schedules that reference them, kept side by side."""

    def __init__(self, history_limit: int | None = None) -> None:
        self.history_limit = history_limit or get_settings().history_limit
        self.schedules = ScheduleStore()
        self.policies = PolicyStore(self.schedules)

    def new_schedule(self, name: str, spec: BackupScheduleSpec | None = None) -> BackupSchedule:
        """Create a schedule in Pending with an empty history of the configured size."""
        status = BackupScheduleStatus(recent_status_info=RunHistory(self.history_limit))
        return self.schedules.create(
            BackupSchedule(name=name, spec=copy.deepcopy(spec) if spec else BackupScheduleSpec(), status=status)
        )

    def policy_for(self, schedule: BackupSchedule) -> SchedulePolicy | None:
        return self.policies.find(schedule.spec.recurrence_policy_ref)


__all__ = ["RecordStore", "ScheduleStore", "PolicyStore", "Catalog"]
