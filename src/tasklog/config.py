# src/tasklog/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

- One Settings object for the whole app.
- Every value has a default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKLOG"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths ----
    data_dir: Path
    store_path: Path
    log_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklog").strip() or "tasklog"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path("~/.tasklog").expanduser())
        store_path = _env_path(_k("STORE_PATH"), data_dir / "tracker.json")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            store_path=store_path,
            log_dir=log_dir,
        )

    def with_data_dir(self, data_dir: Path) -> "Settings":
        """Re-root the default paths under another data dir (CLI --data-dir)."""
        data_dir = Path(data_dir).expanduser()
        return Settings(
            app_name=self.app_name,
            log_level=self.log_level,
            log_to_file=self.log_to_file,
            data_dir=data_dir,
            store_path=data_dir / self.store_path.name,
            log_dir=data_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
