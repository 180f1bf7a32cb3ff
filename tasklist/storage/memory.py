from __future__ import annotations

from .interface import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


__all__ = ["MemoryKeyValueStore"]
