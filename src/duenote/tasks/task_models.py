# src/duenote/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from ..core.errors import MalformedRecordError

DUE_FORMAT = "%d %b %Y, %I:%M %p"


class TaskPriority(IntEnum):
    """
    Task priority.

    The persisted form is the ordinal (0..2), and ties in the task list are
    broken by rank, so the member order matters.
    """

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @classmethod
    def parse(cls, raw: str) -> TaskPriority:
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown priority: {raw!r}") from None

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(slots=True, frozen=True)
class Task:
    title: str
    description: str
    due_at: datetime
    priority: TaskPriority
    notification_id: int
    is_completed: bool = False

    def to_record(self) -> dict[str, Any]:
        return task_to_record(self)

    @classmethod
    def from_record(cls, record: Any) -> Task:
        return task_from_record(record)


def local_now() -> datetime:
    """Current time as an aware datetime in the device's local zone."""
    return datetime.now().astimezone()


def as_local(dt: datetime) -> datetime:
    """
    Attach the local zone to naive datetimes; convert aware ones to local.

    Instants at the edge of the datetime range cannot always be shifted into
    the local zone. Those keep their own offset, or take the current local
    offset when naive.
    """
    try:
        return dt.astimezone()
    except (OverflowError, OSError):
        if dt.tzinfo is not None:
            return dt
        return dt.replace(tzinfo=local_now().tzinfo)


def format_due(dt: datetime) -> str:
    return as_local(dt).strftime(DUE_FORMAT)


def task_sort_key(task: Task) -> tuple[datetime, int]:
    # Earliest due first; on equal due time HIGH before MEDIUM before LOW.
    return task.due_at, -int(task.priority)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "dueDateTime": as_local(task.due_at).isoformat(),
        "priority": int(task.priority),
        "isCompleted": task.is_completed,
        "notificationId": task.notification_id,
    }


def _require(record: Mapping[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in record:
        raise MalformedRecordError(f"missing field {key!r}")
    value = record[key]
    # bool is an int subclass; keep the two apart in both directions.
    if kind is int and isinstance(value, bool):
        raise MalformedRecordError(f"field {key!r} must be int, got bool")
    if not isinstance(value, kind):
        raise MalformedRecordError(
            f"field {key!r} has wrong type {type(value).__name__}"
        )
    return value


def task_from_record(record: Any) -> Task:
    """
    Build a Task from a persisted record.

    Raises MalformedRecordError if any field is absent or of the wrong shape,
    or if the priority index is outside the enum range. Timestamps written
    without an offset are read as device-local time.
    """
    if not isinstance(record, Mapping):
        raise MalformedRecordError(f"record must be an object, got {type(record).__name__}")

    title = _require(record, "title", str)
    description = _require(record, "description", str)
    raw_due = _require(record, "dueDateTime", str)
    raw_priority = _require(record, "priority", int)
    is_completed = _require(record, "isCompleted", bool)
    notification_id = _require(record, "notificationId", int)

    try:
        due_at = as_local(datetime.fromisoformat(raw_due))
    except ValueError as e:
        raise MalformedRecordError(f"bad dueDateTime {raw_due!r}") from e

    try:
        priority = TaskPriority(raw_priority)
    except ValueError as e:
        raise MalformedRecordError(f"priority index {raw_priority} out of range") from e

    return Task(
        title=title,
        description=description,
        due_at=due_at,
        priority=priority,
        notification_id=notification_id,
        is_completed=is_completed,
    )
