from __future__ import annotations

from tasklist.models import Task, TaskId
from tasklist.store import TaskStore


class TaskListController:
    """Interaction state on top of a TaskStore.

    Holds the text typed into the entry box (``draft``), the task currently
    in edit mode (``selected_id``) and the title being edited (``edit_buffer``).
    """

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self.draft = ""
        self.selected_id: TaskId | None = None
        self.edit_buffer = ""

    @property
    def editing(self) -> bool:
        return self.selected_id is not None

    def submit(self) -> Task | None:
        task = self.store.add(self.draft)
        if task is not None:
            self.draft = ""
        return task

    def select(self, task_id: TaskId) -> None:
        task = self.store.get(task_id)
        self.selected_id = task_id
        self.edit_buffer = task.title if task is not None else ""

    def confirm_edit(self) -> Task | None:
        # Blank buffer: stay in edit mode so the user can keep typing
        if self.selected_id is None or not self.edit_buffer.strip():
            return None
        task = self.store.rename(self.selected_id, self.edit_buffer)
        self.cancel_edit()
        return task

    def cancel_edit(self) -> None:
        self.selected_id = None
        self.edit_buffer = ""

    def delete(self, task_id: TaskId) -> Task | None:
        task = self.store.remove(task_id)
        self.cancel_edit()
        return task

    def toggle(self, task_id: TaskId) -> Task | None:
        return self.store.toggle_completed(task_id)


__all__ = ["TaskListController"]
