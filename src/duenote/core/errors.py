# src/duenote/core/errors.py

from __future__ import annotations


class DuenoteError(Exception):
    """Base class for all errors raised by the task core."""


class MalformedRecordError(DuenoteError, ValueError):
    """A persisted task record is missing a field or has the wrong shape."""


class StorageCorruptError(DuenoteError):
    """The task blob exists but does not parse as a list of task records."""


class StorageReadError(DuenoteError):
    """The blob store could not be read at all (I/O or database failure)."""


class StorageWriteError(DuenoteError):
    """Saving the task blob failed."""


class IndexOutOfRangeError(DuenoteError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"task index {index} out of range (size={size})")
        self.index = index
        self.size = size
