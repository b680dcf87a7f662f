# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from duenote.tasks.task_repository import TaskRepository
from duenote.tasks.task_scheduler import ReminderScheduler
from duenote.tasks.task_store import TaskStore

from .fakes import FakeDispatcher, FixedClock, InMemoryBlobStore, RecordingNotices


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="duenote-test",
        log_level="DEBUG",
        timer_log_level="WARNING",
        log_file_max_kb=1024,
        log_file_backups=3,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        tasks_key="tasks",
        reminder_lead_minutes=1,
        notifications_enabled=True,
        skip_malformed_records=True,
    )


@pytest.fixture()
def now() -> datetime:
    # Aware, local zone, on a minute boundary.
    return datetime(2025, 1, 1, 8, 0).astimezone()


@pytest.fixture()
def clock(now: datetime) -> FixedClock:
    return FixedClock(now)


@pytest.fixture()
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture()
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture()
def notices() -> RecordingNotices:
    return RecordingNotices()


@pytest.fixture()
def scheduler(dispatcher: FakeDispatcher, clock: FixedClock, notices: RecordingNotices) -> ReminderScheduler:
    return ReminderScheduler(dispatcher, lead_time=timedelta(minutes=1), clock=clock, notices=notices)


@pytest.fixture()
def store(blobs: InMemoryBlobStore, scheduler: ReminderScheduler, notices: RecordingNotices) -> TaskStore:
    """
    TaskStore wired with in-memory fakes.

    The repository and record codec are real: their behaviour is part of
    what the store tests check.
    """
    return TaskStore(TaskRepository(blobs), scheduler, notices=notices)
