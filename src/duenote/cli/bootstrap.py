# src/duenote/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (blob store, dispatcher, scheduler, store),
- runs the startup sequence (permission request, load, reminder re-declaration).
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..config import get_settings
from ..core.ports import BlobStore, NoticeSink, PermissionGate, ReminderSink
from ..core.state import AppState
from ..notifications.local_dispatcher import AsyncioReminderDispatcher
from ..notifications.permissions import StaticPermissionGate
from ..storage.blob_store import SqliteBlobStore
from ..tasks.task_repository import TaskRepository
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    reminder_sink: ReminderSink,
    notices: NoticeSink,
    settings=None,
    blob_store: BlobStore | None = None,
    permission_gate: PermissionGate | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if blob_store is None:
        _ensure_local_dirs(settings)
        blob_store = SqliteBlobStore(settings.tasks_db_path)

    dispatcher = AsyncioReminderDispatcher(reminder_sink)
    scheduler = ReminderScheduler(
        dispatcher,
        lead_time=timedelta(minutes=settings.reminder_lead_minutes),
        notices=notices,
    )
    store = TaskStore(
        TaskRepository(blob_store, key=settings.tasks_key),
        scheduler,
        notices=notices,
        skip_malformed=settings.skip_malformed_records,
    )

    return AppState(
        settings=settings,
        store=store,
        dispatcher=dispatcher,
        permission_gate=permission_gate or StaticPermissionGate(settings.notifications_enabled),
        notices=notices,
    )


async def start_state(state: AppState) -> None:
    """
    Process-start sequence.

    Permission is asked first but never blocks loading: reminders are
    declared either way and simply won't show if the platform refuses them.
    """
    try:
        state.notifications_granted = await state.permission_gate.request()
    except Exception:
        logger.exception("Notification permission request failed")
        state.notifications_granted = False

    if not state.notifications_granted:
        state.notices.notify("Permission Denied", "Notification permission is required for reminders")

    await state.store.load()


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.dispatcher.shutdown()
    except Exception:
        logger.exception("Dispatcher shutdown failed.")
