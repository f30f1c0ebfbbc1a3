# src/todo_sync/tasks/filtering.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import FilterMode, Task


def matches(task: Task, mode: FilterMode) -> bool:
    if mode == FilterMode.COMPLETED:
        return task.completed
    if mode == FilterMode.INCOMPLETE:
        return not task.completed
    return True


def apply_filter(tasks: Iterable[Task], mode: FilterMode) -> list[Task]:
    """Visible subset of `tasks` under `mode`, in source order."""
    return [t for t in tasks if matches(t, mode)]
