# src/todo_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.errors import TaskSyncError

TaskId = int | str


class FilterMode(StrEnum):
    """Which tasks are visible."""

    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @classmethod
    def parse(cls, raw: str | None) -> FilterMode:
        s = (raw or "").strip().lower()
        try:
            return cls(s)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown filter {raw!r} (expected one of: {choices})") from None


class StoreStatus(StrEnum):
    """
    TaskStore lifecycle.

    uninitialized -> loading -> ready | error
    ready/error   -> mutating -> ready | error
    """

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    MUTATING = "mutating"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    title: str
    details: str
    completed: bool = False

    @classmethod
    def from_json(cls, data: Any) -> Task:
        """Decode the wire shape {id, title, details, completed}. Raises ValueError on mismatch."""
        if not isinstance(data, dict):
            raise ValueError(f"Task must be a JSON object, got {type(data).__name__}")

        missing = [k for k in ("id", "title", "details", "completed") if k not in data]
        if missing:
            raise ValueError(f"Task is missing fields: {', '.join(missing)}")

        task_id = data["id"]
        # bool is an int subclass; a boolean id is never valid.
        if isinstance(task_id, bool) or not isinstance(task_id, (int, str)):
            raise ValueError(f"Task id must be int or str, got {type(task_id).__name__}")

        title = data["title"]
        details = data["details"]
        completed = data["completed"]
        if not isinstance(title, str):
            raise ValueError("Task title must be a string")
        if not isinstance(details, str):
            raise ValueError("Task details must be a string")
        if not isinstance(completed, bool):
            raise ValueError("Task completed must be a boolean")

        return cls(id=task_id, title=title, details=details, completed=completed)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "details": self.details,
            "completed": self.completed,
        }


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Immutable view of a TaskStore delivered to subscribers."""

    tasks: tuple[Task, ...]
    visible: tuple[Task, ...]
    filter_mode: FilterMode
    status: StoreStatus
    error: TaskSyncError | None = None
