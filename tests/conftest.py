"""
Shared pytest fixtures for backup-spine tests.

This module provides:
- Settings cache cleanup for test isolation
- A catalog with a valid daily policy and a schedule referencing it
- A tracker bound to that catalog
- Fixed timestamps so assertions never depend on the wall clock
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest

# Ensure backup_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from backup_spine.core.settings import get_settings
from backup_spine.policy import DailyPolicy, SchedulePolicy, SchedulePolicySpec
from backup_spine.schedule import BackupScheduleSpec, ScheduleTracker
from backup_spine.store import Catalog


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        if not any(True for _ in item.iter_markers()):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so env overrides in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def t0() -> datetime:
    """Deterministic local timestamp: Monday 2024-01-15 01:30."""
    return datetime(2024, 1, 15, 1, 30)


@pytest.fixture
def catalog() -> Catalog:
    """Catalog holding a valid ``nightly`` daily policy."""
    catalog = Catalog(history_limit=10)
    catalog.policies.create(
        SchedulePolicy(name="nightly", spec=SchedulePolicySpec(DailyPolicy(time="01:30")))
    )
    return catalog


@pytest.fixture
def tracker(catalog: Catalog) -> ScheduleTracker:
    return ScheduleTracker(catalog)


@pytest.fixture
def make_schedule(catalog: Catalog, tracker: ScheduleTracker, t0: datetime):
    """Factory: create a schedule on the ``nightly`` policy and reconcile it."""

    def _make(name: str = "db", reconcile: bool = True, **spec_fields):
        spec_fields.setdefault("recurrence_policy_ref", "nightly")
        schedule = catalog.new_schedule(name, BackupScheduleSpec(**spec_fields))
        if reconcile:
            tracker.reconcile(name, now=t0)
        return schedule

    return _make
