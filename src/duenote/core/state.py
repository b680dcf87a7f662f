# src/duenote/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..notifications.local_dispatcher import AsyncioReminderDispatcher
from ..tasks.task_store import TaskStore
from .ports import NoticeSink, PermissionGate


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: TaskStore
    dispatcher: AsyncioReminderDispatcher
    permission_gate: PermissionGate
    notices: NoticeSink

    notifications_granted: bool = False
