# tests/test_blob_store.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from duenote.storage.blob_store import SqliteBlobStore
from duenote.tasks.task_models import Task, TaskPriority
from duenote.tasks.task_repository import TaskRepository


def test_blob_get_set_overwrite_delete(tmp_path: Path) -> None:
    store = SqliteBlobStore(tmp_path / "nested" / "blobs.sqlite3")

    assert store.get("tasks") is None

    store.set("tasks", "[]")
    store.set("tasks", '[{"a": 1}]')
    store.set("other", "x")
    assert store.get("tasks") == '[{"a": 1}]'
    assert store.keys() == ["other", "tasks"]

    store.delete("tasks")
    store.delete("missing")
    assert store.get("tasks") is None


def test_blob_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "blobs.sqlite3"
    SqliteBlobStore(db).set("tasks", "persisted")

    assert SqliteBlobStore(db).get("tasks") == "persisted"


@pytest.mark.asyncio
async def test_repository_on_sqlite(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    tasks = [Task("Pay rent", "d", datetime(2025, 1, 2, 9, 0).astimezone(), TaskPriority.HIGH, 0)]

    await TaskRepository(SqliteBlobStore(db)).save_all(tasks)

    assert await TaskRepository(SqliteBlobStore(db)).load_all() == tasks
