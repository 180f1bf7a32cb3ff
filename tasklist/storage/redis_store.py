from __future__ import annotations

from typing import Any, cast

import redis

from tasklist.errors import StorageError

from .interface import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed slots.

    Data structures:
    - one plain string per slot: key ``{prefix}:{key}`` holding the raw value
    """

    name = "redis"

    def __init__(
        self,
        *,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "tasklist",
        client: Any | None = None,
    ) -> None:
        if client is not None:
            self._redis = client
        else:
            # decode_responses=True returns str everywhere for easier JSON handling
            self._redis = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix.rstrip(":")

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    def get(self, key: str) -> str | None:
        try:
            raw = self._redis.get(self._key(key))
        except redis.exceptions.RedisError as exc:
            raise StorageError(str(exc), key=key, backend=self.name) from exc
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return cast(str | None, raw)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except redis.exceptions.RedisError as exc:
            raise StorageError(str(exc), key=key, backend=self.name) from exc

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except redis.exceptions.RedisError as exc:
            raise StorageError(str(exc), key=key, backend=self.name) from exc


__all__ = ["RedisKeyValueStore"]
