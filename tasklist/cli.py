from __future__ import annotations

import argparse
import math
import sys
from dataclasses import replace

from tasklist.app import open_store
from tasklist.config import BACKENDS, load_config
from tasklist.errors import StorageError
from tasklist.models import Task, TaskId
from tasklist.store import TaskStore

EMPTY_HINT = "No tasks yet. Add one with `tasklist add <title>`."


def _parse_id(raw: str) -> TaskId | None:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}  {task.title}"


def _print_tasks(store: TaskStore) -> None:
    if not len(store):
        print(EMPTY_HINT)
        return
    for task in store:
        print(format_task(task))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("tasklist", description="A small persistent task list")
    parser.add_argument("--backend", choices=list(BACKENDS))
    parser.add_argument("--path", help="Storage file for the file backend")
    parser.add_argument("--key", help="Slot key holding the task list")
    parser.add_argument("--redis-url")
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("list", help="Show all tasks in insertion order")

    p_add = sub.add_parser("add", help="Add a task")
    p_add.add_argument("title", nargs="+")

    p_toggle = sub.add_parser("toggle", help="Flip a task between open and done")
    p_toggle.add_argument("id")

    p_rename = sub.add_parser("rename", help="Change a task's title")
    p_rename.add_argument("id")
    p_rename.add_argument("title", nargs="+")

    p_rm = sub.add_parser("rm", help="Delete a task")
    p_rm.add_argument("id")
    return parser


def _apply(args: argparse.Namespace, store: TaskStore) -> int:
    cmd = str(getattr(args, "cmd", None) or "list")
    if cmd == "list":
        _print_tasks(store)
        return 0

    if cmd == "add":
        task = store.add(" ".join(args.title))
        if task is not None:
            print(f"added {task.id}")
        return 0

    task_id = _parse_id(args.id)
    if task_id is None:
        sys.stderr.write(f"invalid id: {args.id}\n")
        return 2
    if store.get(task_id) is None:
        sys.stderr.write(f"task {args.id} not found\n")
        return 1

    if cmd == "toggle":
        task = store.toggle_completed(task_id)
    elif cmd == "rename":
        task = store.rename(task_id, " ".join(args.title))
    else:
        task = store.remove(task_id)
        if task is not None:
            print(f"removed {task.id}")
        return 0
    if task is not None:
        print(format_task(task))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_config()
    overrides = {
        "backend": args.backend,
        "path": args.path,
        "key": args.key,
        "redis_url": args.redis_url,
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    try:
        store = open_store(settings)
    except StorageError as exc:
        sys.stderr.write(f"error: cannot load tasks: {exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    code = _apply(args, store)
    if store.dirty:
        sys.stderr.write("error: changes could not be saved\n")
        return 1
    return code


if __name__ == "__main__":
    raise SystemExit(main())
