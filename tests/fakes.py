# tests/fakes.py

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from duenote.core.ports import NoticeSink, NotificationDispatcher


class InMemoryBlobStore:
    """Dict-backed BlobStore; optionally fails on reads or writes."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise sqlite3.OperationalError("database is locked")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass(slots=True)
class ScheduledCall:
    notification_id: int
    title: str
    body: str
    fire_at: datetime


@dataclass(slots=True)
class FakeDispatcher(NotificationDispatcher):
    """
    Fake NotificationDispatcher that records calls and tracks what is pending.

    `calls` keeps the order of ("schedule", id) / ("cancel", id) operations.
    """

    scheduled: list[ScheduledCall] = field(default_factory=list)
    cancelled: list[int] = field(default_factory=list)
    calls: list[tuple[str, int]] = field(default_factory=list)
    pending: dict[int, ScheduledCall] = field(default_factory=dict)
    fail_schedule: bool = False
    fail_cancel: bool = False

    async def schedule(self, notification_id: int, title: str, body: str, fire_at: datetime) -> None:
        if self.fail_schedule:
            raise PermissionError("notifications not allowed")
        if notification_id in self.pending:
            raise AssertionError(f"double schedule for id={notification_id}")
        call = ScheduledCall(notification_id, title, body, fire_at)
        self.calls.append(("schedule", notification_id))
        self.scheduled.append(call)
        self.pending[notification_id] = call

    async def cancel(self, notification_id: int) -> None:
        if self.fail_cancel:
            raise RuntimeError("dispatcher unavailable")
        self.calls.append(("cancel", notification_id))
        self.cancelled.append(notification_id)
        self.pending.pop(notification_id, None)


@dataclass(slots=True)
class RecordingNotices(NoticeSink):
    notices: list[tuple[str, str]] = field(default_factory=list)

    def notify(self, title: str, message: str) -> None:
        self.notices.append((title, message))

    @property
    def titles(self) -> list[str]:
        return [t for t, _ in self.notices]


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@dataclass(slots=True)
class Delivered:
    notification_id: int
    title: str
    body: str


@dataclass(slots=True)
class RecordingSink:
    delivered: list[Delivered] = field(default_factory=list)

    async def deliver(self, *, notification_id: int, title: str, body: str) -> None:
        self.delivered.append(Delivered(notification_id, title, body))


class GrantingGate:
    def __init__(self, granted: bool) -> None:
        self.granted = granted
        self.requests = 0

    async def request(self) -> bool:
        self.requests += 1
        return self.granted
