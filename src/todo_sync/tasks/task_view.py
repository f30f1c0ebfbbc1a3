# src/todo_sync/tasks/task_view.py

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.ports import TaskView
from .task_models import StoreSnapshot, Task, TaskId
from .task_store import TaskStore


@dataclass(frozen=True, slots=True)
class TaskActions:
    """
    Callbacks handed to the display layer with every render.

    The view never mutates tasks itself; it calls these and waits for the next render.
    """

    toggle: Callable[[TaskId], Awaitable[Task | None]]
    delete: Callable[[TaskId], Awaitable[bool]]
    update: Callable[[TaskId, str, str], Awaitable[Task | None]]


def task_actions(store: TaskStore) -> TaskActions:
    return TaskActions(
        toggle=store.toggle_task,
        delete=store.delete_task,
        update=store.update_task,
    )


def bind_view(store: TaskStore, view: TaskView, *, render_now: bool = False) -> Callable[[], None]:
    """Render `view` on every store snapshot. Returns the unsubscribe callable."""
    actions = task_actions(store)

    def on_change(snap: StoreSnapshot) -> None:
        view.render(snap.visible, actions, filter_mode=snap.filter_mode, error=snap.error)

    unsubscribe = store.subscribe(on_change)
    if render_now:
        on_change(store.snapshot())
    return unsubscribe
