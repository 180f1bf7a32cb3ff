from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Minimal string key-value interface backing the task slot.

    Keep this tiny and stable so backends can be swapped without touching callers.
    Implementations raise ``StorageError`` when the underlying medium fails.
    """

    name: str

    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None when absent."""

    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""

    def delete(self, key: str) -> None:
        """Remove key if present."""


__all__ = ["KeyValueStore"]
