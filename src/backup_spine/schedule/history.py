"""Bounded run history for a backup schedule.

Holds the most recent runs (started or finished), ordered oldest to newest
by start time. Capacity is fixed at construction; adding a run to a full
history evicts the oldest entry and returns it.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from backup_spine.core.enums import ExecutionStatus

DEFAULT_HISTORY_LIMIT = 10


@dataclass
class StatusInfo:
    """One triggered run: name, outcome and timestamps."""

    backup_name: str
    start_timestamp: datetime
    exec_status: ExecutionStatus = ExecutionStatus.IN_PROGRESS
    completion_timestamp: datetime | None = None
    attempt: int = 0  # 0 for the scheduled run, n for the n-th retry

    @property
    def in_progress(self) -> bool:
        return self.exec_status is ExecutionStatus.IN_PROGRESS


class RunHistory:
    """Fixed-capacity, oldest-evicted-first store of :class:`StatusInfo`."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_LIMIT, entries: Iterable[StatusInfo] = ()) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: list[StatusInfo] = []
        for entry in entries:
            self.add(entry)

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, entry: StatusInfo) -> StatusInfo | None:
        """Insert ``entry`` in start-time order.

        Entries with equal start times keep insertion order.

        Returns:
            The evicted oldest entry when the history was full, else None.
        """
        keys = [e.start_timestamp for e in self._entries]
        index = bisect.bisect_right(keys, entry.start_timestamp)
        self._entries.insert(index, entry)
        if len(self._entries) > self._capacity:
            return self._entries.pop(0)
        return None

    @property
    def latest(self) -> StatusInfo | None:
        return self._entries[-1] if self._entries else None

    @property
    def oldest(self) -> StatusInfo | None:
        return self._entries[0] if self._entries else None

    def find(self, backup_name: str) -> StatusInfo | None:
        """Newest entry named ``backup_name``, if still retained."""
        for entry in reversed(self._entries):
            if entry.backup_name == backup_name:
                return entry
        return None

    def in_progress(self) -> list[StatusInfo]:
        return [e for e in self._entries if e.in_progress]

    def __iter__(self) -> Iterator[StatusInfo]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> StatusInfo:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"RunHistory(capacity={self._capacity}, size={len(self._entries)})"
