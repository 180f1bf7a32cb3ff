from __future__ import annotations

from tasklist.models import Task
from tasklist.persistence import PersistenceAdapter
from tasklist.store import TaskStore

__all__ = ["PersistenceAdapter", "Task", "TaskStore"]
