# src/duenote/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal

from ..core.errors import (
    IndexOutOfRangeError,
    StorageCorruptError,
    StorageReadError,
    StorageWriteError,
)
from ..core.ports import NoticeSink
from .id_allocator import NotificationIdAllocator
from .task_models import Task, TaskPriority, as_local, task_sort_key
from .task_repository import TaskRepository
from .task_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

EventKind = Literal["loaded", "added", "updated", "toggled", "deleted"]


@dataclass(slots=True, frozen=True)
class TaskEvent:
    """
    Emitted after every store operation, once its side effects are done.

    `task` is the affected task (None for "loaded"), `index` its position
    after the operation (or before removal, for "deleted").
    """

    kind: EventKind
    task: Task | None
    index: int | None
    persisted: bool


TaskListener = Callable[[TaskEvent], None]


class TaskStore:
    """
    Owns the ordered task list.

    Every mutation goes through here: the store keeps the list sorted,
    re-arms reminders through the scheduler and saves through the repository
    before returning. Failures of either collaborator never undo the
    in-memory change; they are logged and reported as notices.

    Ordering: earliest due first, then HIGH > MEDIUM > LOW. Adds and edits
    re-sort; toggles and deletes keep the current order.
    """

    def __init__(
        self,
        repository: TaskRepository,
        scheduler: ReminderScheduler,
        *,
        allocator: NotificationIdAllocator | None = None,
        notices: NoticeSink | None = None,
        skip_malformed: bool = True,
    ) -> None:
        self._repo = repository
        self._scheduler = scheduler
        self._allocator = allocator or NotificationIdAllocator()
        self._notices = notices
        self._skip_malformed = skip_malformed
        self._tasks: list[Task] = []
        self._listeners: list[TaskListener] = []
        self.last_save_error: StorageWriteError | None = None

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def allocator(self) -> NotificationIdAllocator:
        return self._allocator

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def __getitem__(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks[index]

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- startup ----

    async def load(self) -> list[Task]:
        """
        Load persisted tasks and re-declare their reminders.

        An unreadable blob is backed up and replaced by an empty list rather
        than aborting startup. If the store cannot be read at all there is
        nothing to back up; the list just starts empty.
        """
        try:
            loaded = await self._repo.load_all(skip_malformed=self._skip_malformed)
        except StorageCorruptError as e:
            logger.error("Stored tasks are unreadable, starting empty: %s", e)
            await self._repo.backup_raw()
            self._notice("Tasks could not be loaded", "Saved tasks were unreadable; starting with an empty list.")
            loaded = []
        except StorageReadError as e:
            logger.error("Task storage could not be read, starting empty: %s", e)
            self._notice("Tasks could not be loaded", "Task storage could not be read; starting with an empty list.")
            loaded = []

        self._tasks = list(loaded)
        self._sort()
        self._allocator.reseed(self._tasks)
        await self._scheduler.reschedule_all(self._tasks)

        logger.info(
            "TaskStore loaded tasks=%d next_notification_id=%d",
            len(self._tasks),
            self._allocator.peek(),
        )
        self._emit(TaskEvent(kind="loaded", task=None, index=None, persisted=True))
        return list(self._tasks)

    # ---- mutations ----

    async def add_task(
        self,
        title: str,
        description: str,
        due_at: datetime,
        priority: TaskPriority,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            due_at=as_local(due_at),
            priority=TaskPriority(priority),
            notification_id=self._allocator.next(),
            is_completed=False,
        )
        self._tasks.append(task)
        try:
            if not task.is_completed:
                await self._scheduler.schedule(task)
        finally:
            self._sort()
            persisted = await self._persist()

        logger.debug("Task added id=%s due=%s priority=%s", task.notification_id, task.due_at, task.priority.name)
        self._emit(TaskEvent(kind="added", task=task, index=self.index_of(task), persisted=persisted))
        return task

    async def update_task(self, index: int, task: Task) -> Task:
        """
        Replace the task at `index` with the edited values.

        The reminder slot (notification id) stays with the task across edits;
        completion state is taken from `task`.
        """
        self._check_index(index)
        old = self._tasks[index]

        await self._scheduler.cancel(old.notification_id)

        new = replace(
            task,
            due_at=as_local(task.due_at),
            priority=TaskPriority(task.priority),
            notification_id=old.notification_id,
        )
        self._tasks[index] = new
        try:
            if not new.is_completed:
                await self._scheduler.schedule(new)
        finally:
            self._sort()
            persisted = await self._persist()

        logger.debug("Task updated id=%s", new.notification_id)
        self._emit(TaskEvent(kind="updated", task=new, index=self.index_of(new), persisted=persisted))
        return new

    async def toggle_completion(self, index: int) -> Task:
        self._check_index(index)
        current = self._tasks[index]
        task = replace(current, is_completed=not current.is_completed)
        self._tasks[index] = task

        try:
            if task.is_completed:
                await self._scheduler.cancel(task.notification_id)
            else:
                await self._scheduler.schedule(task)
        finally:
            persisted = await self._persist()

        logger.debug("Task toggled id=%s completed=%s", task.notification_id, task.is_completed)
        self._emit(TaskEvent(kind="toggled", task=task, index=index, persisted=persisted))
        return task

    async def delete_task(self, index: int) -> Task:
        self._check_index(index)
        task = self._tasks[index]

        await self._scheduler.cancel(task.notification_id)
        del self._tasks[index]
        persisted = await self._persist()

        logger.debug("Task deleted id=%s", task.notification_id)
        self._emit(TaskEvent(kind="deleted", task=task, index=index, persisted=persisted))
        return task

    def index_of(self, task: Task) -> int:
        """Position of this exact task object. Equal copies do not match."""
        for i, t in enumerate(self._tasks):
            if t is task:
                return i
        raise LookupError(f"task id={task.notification_id} not in store")

    # ---- helpers ----

    def _check_index(self, index: int) -> None:
        # Negative indexes are rejected rather than counted from the end.
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._tasks):
            raise IndexOutOfRangeError(index, len(self._tasks))

    def _sort(self) -> None:
        # list.sort is stable: fully tied tasks keep their relative order.
        self._tasks.sort(key=task_sort_key)

    async def _persist(self) -> bool:
        try:
            await self._repo.save_all(self._tasks)
        except StorageWriteError as e:
            logger.error("Saving tasks failed (in-memory state kept): %s", e)
            self.last_save_error = e
            self._notice("Tasks not saved", "Your changes are kept for now but could not be written to disk.")
            return False
        self.last_save_error = None
        return True

    def _emit(self, event: TaskEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Task listener failed on %s", event.kind)

    def _notice(self, title: str, message: str) -> None:
        if self._notices is None:
            return
        try:
            self._notices.notify(title, message)
        except Exception:
            logger.exception("Notice sink failed")
