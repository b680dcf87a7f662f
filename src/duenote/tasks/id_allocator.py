# src/duenote/tasks/id_allocator.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task


class NotificationIdAllocator:
    """
    Hands out notification ids.

    The counter only moves forward: ids of deleted tasks are never handed out
    again during the process lifetime, so a reminder that is still pending on
    the platform side can't be hijacked by a new task.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be >= 0")
        self._next = int(start)

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> NotificationIdAllocator:
        allocator = cls()
        allocator.reseed(tasks)
        return allocator

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        return self._next

    def reseed(self, tasks: Iterable[Task]) -> None:
        """Move the counter past every id in `tasks` (never backwards)."""
        high = max((t.notification_id for t in tasks), default=-1)
        self._next = max(self._next, high + 1)
