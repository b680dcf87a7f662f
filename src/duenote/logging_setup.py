# src/duenote/logging_setup.py

from __future__ import annotations

import logging
import logging.handlers
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

APP_LOGGER = "duenote"
LOG_FILE_NAME = "duenote.log"

DEFAULT_LOG_DIR = Path(".local/duenote")
DEFAULT_MAX_BYTES = 1024 * 1024
DEFAULT_BACKUP_COUNT = 3

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_level(value: Any, default: int = logging.INFO) -> int:
    """Accept 10 / "debug" / "WARNING"; anything unknown falls back to `default`."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return logging.getLevelNamesMapping().get(str(value).strip().upper(), default)


def _under(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".")


class ConsoleFilter(logging.Filter):
    """
    Decides what reaches the interactive console.

    `floors` maps logger prefixes to a minimum level and is checked first,
    most specific prefix wins. Records under `app_prefix` otherwise pass
    (the handler level still applies). Everything else needs `other_level`.
    """

    def __init__(
            self,
            app_prefix: str = APP_LOGGER,
            floors: Mapping[str, int] | None = None,
            other_level: int = logging.ERROR,
    ) -> None:
        super().__init__()
        self.app_prefix = app_prefix
        self.floors = sorted((floors or {}).items(), key=lambda kv: len(kv[0]), reverse=True)
        self.other_level = other_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        for prefix, floor in self.floors:
            if _under(name, prefix):
                return record.levelno >= floor
        if _under(name, self.app_prefix):
            return True
        return record.levelno >= self.other_level


def setup_logging(
    *,
    log_dir: str | Path = DEFAULT_LOG_DIR,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    timer_level: int = logging.WARNING,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> Path:
    """
    Install the root handlers and return the log file path.

    - stderr: filtered for the prompt. Reminder timer logs
      (`duenote.notifications`) need `timer_level`, captured warnings need
      ERROR, other libraries need ERROR.
    - file: everything at `file_level`, rotated at `max_bytes` with
      `backup_count` old files kept. `max_bytes=0` never rotates.

    Replaces any handlers already on the root logger, so calling it twice
    doesn't duplicate output.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(
        ConsoleFilter(
            APP_LOGGER,
            floors={
                f"{APP_LOGGER}.notifications": timer_level,
                "py.warnings": logging.ERROR,
            },
        )
    )
    root.addHandler(ch)

    fh = logging.handlers.RotatingFileHandler(
        str(log_file),
        maxBytes=max(0, max_bytes),
        backupCount=max(0, backup_count),
        encoding="utf-8",
    )
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file


def setup_logging_from_settings(settings: Any) -> Path:
    """Map Settings (or any object with the same attributes) onto setup_logging."""
    return setup_logging(
        log_dir=getattr(settings, "data_dir", DEFAULT_LOG_DIR),
        console_level=parse_level(getattr(settings, "log_level", "INFO")),
        timer_level=parse_level(getattr(settings, "timer_log_level", "WARNING"), logging.WARNING),
        max_bytes=int(getattr(settings, "log_file_max_kb", DEFAULT_MAX_BYTES // 1024)) * 1024,
        backup_count=int(getattr(settings, "log_file_backups", DEFAULT_BACKUP_COUNT)),
    )
