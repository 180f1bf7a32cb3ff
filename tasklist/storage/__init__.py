from __future__ import annotations

from .file_store import FileKeyValueStore
from .interface import KeyValueStore
from .memory import MemoryKeyValueStore

__all__ = ["FileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]
