# src/duenote/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and the notification platform swappable and makes testing easier.
"""

from datetime import datetime
from typing import Awaitable, Protocol


class BlobStore(Protocol):
    """
    Opaque string-keyed key/value storage.

    A single set() is assumed to be atomic; nothing else is promised.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class NotificationDispatcher(Protocol):
    """
    Platform-side port: schedules and cancels local reminders keyed by notification id.

    The dispatcher decides how to actually alert the user (OS alarm, console, ...).
    """

    def schedule(
            self,
            notification_id: int,
            title: str,
            body: str,
            fire_at: datetime,
    ) -> Awaitable[None]: ...

    def cancel(self, notification_id: int) -> Awaitable[None]: ...


class ReminderSink(Protocol):
    """Where a fired reminder ends up (console line, desktop popup, ...)."""

    def deliver(self, *, notification_id: int, title: str, body: str) -> Awaitable[None]: ...


class PermissionGate(Protocol):
    """Asks the platform for permission to post notifications."""

    def request(self) -> Awaitable[bool]: ...


class NoticeSink(Protocol):
    """Non-fatal, user-visible notices (permission denied, save failed, ...)."""

    def notify(self, title: str, message: str) -> None: ...
