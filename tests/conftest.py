from __future__ import annotations

import logging
import os
from functools import lru_cache

import pytest

from tasklist.observability import ConsoleLogFormatter, JsonLogFormatter, reset_metrics
from tasklist.persistence import PersistenceAdapter
from tasklist.store import TaskStore

from tests.helpers.kv import RecordingKeyValueStore
from tests.helpers.logs import LogCapture


@pytest.fixture(autouse=True)
def _fresh_observability() -> None:
    """Reset counters and drop cached handlers bound to a previous test's stdout."""
    reset_metrics()
    for name in list(logging.root.manager.loggerDict):
        if name == "tasklist" or name.startswith("tasklist."):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                if isinstance(handler.formatter, JsonLogFormatter | ConsoleLogFormatter):
                    logger.removeHandler(handler)


@pytest.fixture()
def backend() -> RecordingKeyValueStore:
    return RecordingKeyValueStore()


@pytest.fixture()
def log_capture() -> LogCapture:
    return LogCapture()


@pytest.fixture()
def adapter(backend: RecordingKeyValueStore, log_capture: LogCapture) -> PersistenceAdapter:
    return PersistenceAdapter(backend, logger=log_capture.logger)


@pytest.fixture()
def store(adapter: PersistenceAdapter, log_capture: LogCapture) -> TaskStore:
    return TaskStore.open(adapter, logger=log_capture.logger)


def _redis_ping(url: str) -> bool:
    try:
        import redis

        r = redis.Redis.from_url(url)
        return bool(r.ping())
    except Exception:
        return False


@lru_cache(maxsize=1)
def _local_redis_url() -> str | None:
    for url in (os.getenv("REDIS_URL"), "redis://localhost:6379/0"):
        if url and _redis_ping(url):
            return url
    return None


@pytest.fixture(scope="session")
def redis_url() -> str:
    """Provide a reachable Redis URL (REDIS_URL first, then localhost)."""
    url = _local_redis_url()
    if url is None:
        pytest.skip("Redis not available; set REDIS_URL or start local Redis")
    return url


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip tests marked 'redis' up front when no server answers."""
    if _local_redis_url() is not None:
        return
    for item in items:
        if "redis" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Redis not available; set REDIS_URL or start local Redis")
            )
