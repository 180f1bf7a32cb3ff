from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, TypeAdapter

# Ids issued by this package are ints. Collections written by the older
# random-id scheme carry floats in [0, 1), which still load. Non-finite
# numbers (1e400, NaN, Infinity) are rejected.
TaskId = int | FiniteFloat


class Task(BaseModel):
    """One to-do record.

    - ``id`` is fixed at creation
    - ``title`` is stored verbatim; blank titles are rejected by the store
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: TaskId = Field(frozen=True)
    title: str
    completed: bool = False


TaskListAdapter: TypeAdapter[list[Task]] = TypeAdapter(list[Task])


__all__ = ["Task", "TaskId", "TaskListAdapter"]
