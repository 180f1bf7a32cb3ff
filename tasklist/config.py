from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

BACKENDS = ("file", "redis", "memory")


@dataclass(slots=True)
class Settings:
    backend: str
    path: str
    key: str
    redis_url: str
    key_prefix: str
    strict_load: bool


def _truthy(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def load_config(env: dict[str, str] | None = None) -> Settings:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    backend = (e.get("TASKLIST_BACKEND") or "file").strip().lower()
    return Settings(
        backend=backend,
        path=os.path.expanduser(e.get("TASKLIST_PATH") or "~/.tasklist/storage.json"),
        key=(e.get("TASKLIST_KEY") or "todos").strip() or "todos",
        redis_url=e.get("REDIS_URL") or "redis://localhost:6379/0",
        key_prefix=e.get("TASKLIST_KEY_PREFIX", "tasklist"),
        strict_load=_truthy(e.get("TASKLIST_STRICT_LOAD")),
    )


__all__ = ["BACKENDS", "Settings", "load_config"]
