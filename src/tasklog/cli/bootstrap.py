# src/tasklog/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures the per-user data directory exists,
- wires the JSON store into a TrackerEngine.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..tracker.engine import Clock, TrackerEngine, utc_now
from ..tracker.store import JsonStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_engine(*, settings=None, clock: Clock = utc_now) -> TrackerEngine:
    """
    Build a TrackerEngine from the provided settings.

    Settings stay injectable so tests never read the real config.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = JsonStore(settings.store_path)
    logger.debug("Engine wired store=%s", store.path)
    return TrackerEngine(store, clock=clock)
