from __future__ import annotations

from typing import Any

from tasklist.config import BACKENDS, Settings, load_config
from tasklist.observability import get_json_logger
from tasklist.persistence import PersistenceAdapter
from tasklist.storage import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from tasklist.store import TaskStore


def _backend_attributes(settings: Settings) -> dict[str, Any]:
    attrs: dict[str, Any] = {
        "backend": settings.backend,
        "key": settings.key,
        "strict_load": settings.strict_load,
    }
    if settings.backend == "file":
        attrs["path"] = settings.path
    elif settings.backend == "redis":
        # Redacted by the JSON formatter; the URL may embed a password
        attrs["redis_url"] = settings.redis_url
        attrs["key_prefix"] = settings.key_prefix
    return attrs


def _create_backend(settings: Settings) -> KeyValueStore:
    if settings.backend == "file":
        return FileKeyValueStore(settings.path)
    if settings.backend == "memory":
        return MemoryKeyValueStore()
    if settings.backend == "redis":
        # Defer import so file/memory sessions never touch the redis client
        from tasklist.storage.redis_store import RedisKeyValueStore

        return RedisKeyValueStore(url=settings.redis_url, key_prefix=settings.key_prefix)
    raise ValueError(f"unknown backend {settings.backend!r}; expected one of {', '.join(BACKENDS)}")


def build_backend(settings: Settings) -> KeyValueStore:
    backend = _create_backend(settings)
    get_json_logger("tasklist.app").info(
        "backend configured",
        extra={"event": "backend_configured", "attributes": _backend_attributes(settings)},
    )
    return backend


def open_store(settings: Settings | None = None) -> TaskStore:
    """Build the configured backend, load the slot once and return the session store."""
    cfg = settings or load_config()
    adapter = PersistenceAdapter(build_backend(cfg), key=cfg.key, strict=cfg.strict_load)
    return TaskStore.open(adapter)


__all__ = ["build_backend", "open_store"]
