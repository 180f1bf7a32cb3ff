from __future__ import annotations


class TaskListError(Exception):
    """Base class for all tasklist errors."""


class StorageError(TaskListError):
    """A key-value backend could not read or write a slot.

    The backend-specific exception (``OSError``, ``RedisError`` ...) is kept as
    ``__cause__``.
    """

    def __init__(self, message: str, *, key: str | None = None, backend: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.backend = backend


class MalformedDataError(StorageError):
    """The slot holds a value that is not a valid task collection."""


__all__ = ["TaskListError", "StorageError", "MalformedDataError"]
