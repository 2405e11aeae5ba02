# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklog.tracker.engine import TrackerEngine
from tasklog.tracker.store import JsonStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the CLI and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the user's ~/.tasklog.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="tasklog-test",
        log_level="WARNING",
        log_to_file=False,
        data_dir=data_dir,
        store_path=data_dir / "tracker.json",
        log_dir=data_dir,
    )


@pytest.fixture()
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(tmp_path / "store" / "tracker.json")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def engine(store: JsonStore, clock: FakeClock) -> TrackerEngine:
    """Engine on a real JSON file; only time is faked."""
    return TrackerEngine(store, clock=clock)
