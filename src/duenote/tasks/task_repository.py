# src/duenote/tasks/task_repository.py

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable

from ..core.errors import (
    MalformedRecordError,
    StorageCorruptError,
    StorageReadError,
    StorageWriteError,
)
from ..core.ports import BlobStore
from .task_models import Task, task_from_record, task_to_record

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "tasks"


class TaskRepository:
    """
    Loads and saves the whole task list as one JSON array blob.

    Blob store calls are pushed to a worker thread so the event loop
    doesn't block on disk I/O.
    """

    def __init__(self, blob_store: BlobStore, key: str = DEFAULT_TASKS_KEY) -> None:
        self._blobs = blob_store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load_all(self, *, skip_malformed: bool = False) -> list[Task]:
        """
        Return the persisted tasks, or [] if nothing was ever saved.

        Raises StorageReadError if the blob store itself fails, and
        StorageCorruptError if the blob is not a JSON array. Malformed
        records raise too, unless skip_malformed is set, in which case they
        are logged and dropped.
        """
        try:
            raw = await asyncio.to_thread(self._blobs.get, self._key)
        except Exception as e:
            raise StorageReadError(f"failed to read {self._key!r}: {e}") from e
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageCorruptError(f"blob {self._key!r} is not valid JSON") from e

        if not isinstance(data, list):
            raise StorageCorruptError(
                f"blob {self._key!r} must hold a JSON array, got {type(data).__name__}"
            )

        tasks: list[Task] = []
        for pos, record in enumerate(data):
            try:
                tasks.append(task_from_record(record))
            except MalformedRecordError as e:
                if not skip_malformed:
                    raise StorageCorruptError(f"record #{pos} in {self._key!r}: {e}") from e
                logger.warning("Skipping malformed task record #%d: %s", pos, e)

        logger.debug("Loaded %d task(s) from key=%s", len(tasks), self._key)
        return tasks

    async def save_all(self, tasks: Iterable[Task]) -> None:
        payload = json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)
        try:
            await asyncio.to_thread(self._blobs.set, self._key, payload)
        except Exception as e:
            raise StorageWriteError(f"failed to save {self._key!r}: {e}") from e

    async def backup_raw(self, suffix: str = ".corrupt") -> str | None:
        """
        Copy the current raw blob aside so an unreadable task list isn't lost
        on the next save. Best-effort: returns the backup key, or None.
        """
        backup_key = f"{self._key}{suffix}"
        try:
            raw = await asyncio.to_thread(self._blobs.get, self._key)
            if raw is None:
                return None
            await asyncio.to_thread(self._blobs.set, backup_key, raw)
        except Exception:
            logger.exception("Failed to back up blob key=%s", self._key)
            return None
        logger.info("Backed up unreadable blob key=%s -> %s", self._key, backup_key)
        return backup_key
