from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from pydantic import ValidationError

from tasklist.errors import MalformedDataError
from tasklist.models import Task, TaskListAdapter
from tasklist.observability import get_json_logger, get_metrics
from tasklist.storage.interface import KeyValueStore

DEFAULT_KEY = "todos"


class PersistenceAdapter:
    """Load/save bridge between a TaskStore and one key-value slot.

    The slot value is a compact JSON array of ``{id, title, completed}``
    records. ``save`` always overwrites the whole collection.

    With ``strict=False`` (the default) a malformed slot loads as an empty
    collection and a warning is logged; with ``strict=True`` it raises
    ``MalformedDataError``. Backend failures propagate as ``StorageError``
    in both modes.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        key: str = DEFAULT_KEY,
        strict: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._backend = backend
        self._key = key
        self._strict = strict
        self._logger = logger or get_json_logger("tasklist.persistence")

    @property
    def key(self) -> str:
        return self._key

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    def load(self) -> list[Task]:
        raw = self._backend.get(self._key)
        if raw is None:
            return []
        try:
            return TaskListAdapter.validate_json(raw)
        except ValidationError as exc:
            if self._strict:
                raise MalformedDataError(
                    f"slot {self._key!r} does not hold a task list",
                    key=self._key,
                    backend=self._backend.name,
                ) from exc
            self._logger.warning(
                "malformed task data, starting empty",
                exc_info=True,
                extra={
                    "event": "load_fallback",
                    "key": self._key,
                    "backend": self._backend.name,
                },
            )
            get_metrics().increment("load_fallbacks", {"backend": self._backend.name})
            return []

    def save(self, tasks: Iterable[Task]) -> None:
        payload = json.dumps(
            [t.model_dump(mode="json") for t in tasks],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        self._backend.set(self._key, payload)
        get_metrics().increment("persist_writes", {"backend": self._backend.name})

    def clear(self) -> None:
        self._backend.delete(self._key)


__all__ = ["DEFAULT_KEY", "PersistenceAdapter"]
