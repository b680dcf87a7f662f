# src/duenote/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Turns a Task into a platform reminder (or removes one):
- computes the fire time (due time minus a fixed lead time),
- skips reminders that would fire in the past,
- cancels before scheduling so at most one reminder is pending per notification id,
- reports platform failures as notices instead of raising.

How a reminder is actually shown belongs to the dispatcher, not the scheduler.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from ..core.ports import NoticeSink, NotificationDispatcher
from .task_models import Task, format_due, local_now

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME = timedelta(minutes=1)


def reminder_title(task: Task) -> str:
    return f"Task Reminder: {task.title}"


def reminder_body(task: Task) -> str:
    return f"Your task is due at {format_due(task.due_at)}!"


class ReminderScheduler:
    def __init__(
            self,
            dispatcher: NotificationDispatcher,
            *,
            lead_time: timedelta = DEFAULT_LEAD_TIME,
            clock: Callable[[], datetime] | None = None,
            notices: NoticeSink | None = None,
    ) -> None:
        if lead_time < timedelta(0):
            raise ValueError("lead_time must not be negative")
        self._dispatcher = dispatcher
        self._lead_time = lead_time
        self._clock = clock or local_now
        self._notices = notices

    @property
    def lead_time(self) -> timedelta:
        return self._lead_time

    def compute_reminder_at(self, task: Task) -> datetime:
        return task.due_at - self._lead_time

    async def schedule(self, task: Task) -> bool:
        """
        Arm the reminder for `task`.

        Returns False (and does nothing) when the reminder time is not strictly
        in the future, or when the platform rejected the request.
        """
        try:
            fire_at = self.compute_reminder_at(task)
        except OverflowError:
            logger.debug(
                "Reminder skipped (out of range) id=%s due_at=%s",
                task.notification_id,
                task.due_at,
            )
            return False
        if fire_at <= self._clock():
            logger.debug(
                "Reminder skipped (past) id=%s fire_at=%s", task.notification_id, fire_at
            )
            return False

        try:
            await self._dispatcher.cancel(task.notification_id)
            await self._dispatcher.schedule(
                task.notification_id,
                reminder_title(task),
                reminder_body(task),
                fire_at,
            )
        except Exception:
            logger.exception("Scheduling reminder failed id=%s", task.notification_id)
            self._notice(
                "Reminder unavailable",
                f"Could not schedule a reminder for '{task.title}'. The task was still saved.",
            )
            return False

        logger.info("Reminder scheduled id=%s fire_at=%s", task.notification_id, fire_at)
        return True

    async def cancel(self, notification_id: int) -> None:
        try:
            await self._dispatcher.cancel(notification_id)
        except Exception:
            logger.exception("Cancelling reminder failed id=%s", notification_id)
            self._notice(
                "Reminder unavailable",
                "Could not cancel a pending reminder; it may still fire.",
            )
            return
        logger.debug("Reminder cancelled id=%s", notification_id)

    async def reschedule_all(self, tasks: Iterable[Task]) -> int:
        """
        Re-declare every live reminder.

        The platform's own queue is not trusted to survive a restart, so each
        incomplete task is scheduled again whether or not it was armed before.
        """
        count = 0
        for task in tasks:
            if task.is_completed:
                continue
            if await self.schedule(task):
                count += 1
        logger.info("Rescheduled %d reminder(s) on startup", count)
        return count

    def _notice(self, title: str, message: str) -> None:
        if self._notices is None:
            return
        try:
            self._notices.notify(title, message)
        except Exception:
            logger.exception("Notice sink failed")
