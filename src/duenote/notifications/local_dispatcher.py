# src/duenote/notifications/local_dispatcher.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import ReminderSink
from ..tasks.task_models import local_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Pending:
    title: str
    body: str
    fire_at: datetime
    handle: asyncio.TimerHandle


class AsyncioReminderDispatcher:
    """
    In-process notification dispatcher.

    Each reminder is a loop.call_later timer keyed by notification id. When it
    fires, the reminder is handed to the sink on the same loop. Nothing here
    survives the process; callers re-declare reminders on startup.
    """

    def __init__(self, sink: ReminderSink) -> None:
        self._sink = sink
        self._pending: dict[int, _Pending] = {}
        self._deliveries: set[asyncio.Task[None]] = set()

    async def schedule(self, notification_id: int, title: str, body: str, fire_at: datetime) -> None:
        loop = asyncio.get_running_loop()
        self._drop(notification_id)

        delay = max(0.0, (fire_at - local_now()).total_seconds())
        handle = loop.call_later(delay, self._fire, notification_id)
        self._pending[notification_id] = _Pending(title=title, body=body, fire_at=fire_at, handle=handle)
        logger.debug("Timer armed id=%s in %.1fs", notification_id, delay)

    async def cancel(self, notification_id: int) -> None:
        if self._drop(notification_id):
            logger.debug("Timer cancelled id=%s", notification_id)

    def pending_ids(self) -> list[int]:
        return sorted(self._pending)

    def fire_time(self, notification_id: int) -> datetime | None:
        p = self._pending.get(notification_id)
        return None if p is None else p.fire_at

    def shutdown(self) -> None:
        for nid in list(self._pending):
            self._drop(nid)
        for t in list(self._deliveries):
            t.cancel()

    def _drop(self, notification_id: int) -> bool:
        p = self._pending.pop(notification_id, None)
        if p is None:
            return False
        p.handle.cancel()
        return True

    def _fire(self, notification_id: int) -> None:
        p = self._pending.pop(notification_id, None)
        if p is None:
            return
        logger.info("Reminder fired id=%s", notification_id)
        task = asyncio.get_running_loop().create_task(self._deliver(notification_id, p))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, notification_id: int, p: _Pending) -> None:
        try:
            await self._sink.deliver(notification_id=notification_id, title=p.title, body=p.body)
        except Exception:
            logger.exception("Reminder delivery failed id=%s", notification_id)
