# src/duenote/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every field has a default.
- The composition root accepts an injected settings object, so tests never read the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DUENOTE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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
    timer_log_level: str
    log_file_max_kb: int
    log_file_backups: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    tasks_key: str

    # ---- Reminders ----
    reminder_lead_minutes: int
    notifications_enabled: bool

    # ---- Loading policy ----
    skip_malformed_records: bool

    @property
    def reminder_lead_time(self) -> timedelta:
        return timedelta(minutes=self.reminder_lead_minutes)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "duenote").strip() or "duenote"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        timer_log_level = _env(_k("TIMER_LOG_LEVEL"), "WARNING")
        log_file_max_kb = max(0, _env_int(_k("LOG_FILE_MAX_KB"), 1024))
        log_file_backups = max(0, _env_int(_k("LOG_FILE_BACKUPS"), 3))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/duenote"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        tasks_key = _env(_k("TASKS_KEY"), "tasks").strip() or "tasks"

        reminder_lead_minutes = max(0, _env_int(_k("REMINDER_LEAD_MINUTES"), 1))
        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)

        skip_malformed_records = _env_bool(_k("SKIP_MALFORMED_RECORDS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            timer_log_level=timer_log_level,
            log_file_max_kb=log_file_max_kb,
            log_file_backups=log_file_backups,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            tasks_key=tasks_key,
            reminder_lead_minutes=reminder_lead_minutes,
            notifications_enabled=notifications_enabled,
            skip_malformed_records=skip_malformed_records,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
