from __future__ import annotations

import functools
import logging
import math
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar, cast

from tasklist.errors import StorageError
from tasklist.models import Task, TaskId
from tasklist.observability import get_json_logger, get_metrics
from tasklist.persistence import PersistenceAdapter

F = TypeVar("F", bound=Callable[..., Any])


class _RejectedTitle(ValueError):
    pass


def _require_title(value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _RejectedTitle("title must be non-empty")
    return value


def persisted(op: str) -> Callable[[F], F]:
    """Run a mutation, then write the whole collection.

    A rejected title skips the write and makes the call return None. Storage
    failures are logged and leave the store ``dirty`` instead of raising.
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self: TaskStore, *args: Any, **kwargs: Any) -> Any:
            try:
                result = method(self, *args, **kwargs)
            except _RejectedTitle:
                self._logger.debug(
                    "blank title ignored", extra={"event": "task_rejected", "op": op}
                )
                return None
            get_metrics().increment("mutations", {"op": op})
            self._persist(op)
            return result

        return cast(F, wrapper)

    return decorator


class TaskStore:
    """Ordered in-memory task collection mirrored to a persistence slot.

    Build one per session with ``TaskStore.open(adapter)``, which performs the
    single load. Mutations never raise: blank titles and unknown ids are
    silent no-ops.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        tasks: Iterable[Task] = (),
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._adapter = adapter
        self._tasks: list[Task] = list(tasks)
        self._logger = logger or get_json_logger("tasklist.store")
        self._next_id = max((math.floor(t.id) for t in self._tasks), default=0) + 1
        self.dirty = False

    @classmethod
    def open(
        cls, adapter: PersistenceAdapter, *, logger: logging.Logger | None = None
    ) -> TaskStore:
        tasks = adapter.load()
        store = cls(adapter, tasks, logger=logger)
        store._logger.info(
            "task store loaded",
            extra={"event": "store_loaded", "key": adapter.key, "count": len(tasks)},
        )
        return store

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: TaskId) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    # ---- mutations ----

    @persisted("add")
    def add(self, title: str) -> Task | None:
        checked = _require_title(title)
        task = Task(id=self._allocate_id(), title=checked)
        self._tasks.append(task)
        self._logger.info("task added", extra={"event": "task_added", "task_id": task.id})
        return task

    @persisted("remove")
    def remove(self, task_id: TaskId) -> Task | None:
        task = self.get(task_id)
        if task is not None:
            self._tasks.remove(task)
            self._logger.info("task removed", extra={"event": "task_removed", "task_id": task_id})
        return task

    @persisted("toggle")
    def toggle_completed(self, task_id: TaskId) -> Task | None:
        task = self.get(task_id)
        if task is not None:
            task.completed = not task.completed
            self._logger.info(
                "task toggled",
                extra={
                    "event": "task_toggled",
                    "task_id": task_id,
                    "kv": {"completed": task.completed},
                },
            )
        return task

    @persisted("rename")
    def rename(self, task_id: TaskId, new_title: str) -> Task | None:
        title = _require_title(new_title)
        task = self.get(task_id)
        if task is not None:
            task.title = title
            self._logger.info("task renamed", extra={"event": "task_renamed", "task_id": task_id})
        return task

    def flush(self) -> bool:
        """Write the current collection again; True once the slot is in sync."""
        self._persist("flush")
        return not self.dirty

    # ---- internals ----

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def _persist(self, op: str) -> None:
        try:
            self._adapter.save(self._tasks)
        except StorageError:
            self.dirty = True
            get_metrics().increment("persist_errors", {"op": op})
            self._logger.error(
                "could not persist tasks",
                exc_info=True,
                extra={"event": "persist_failed", "op": op, "key": self._adapter.key},
            )
        else:
            self.dirty = False


__all__ = ["TaskStore", "persisted"]
