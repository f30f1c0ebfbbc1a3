# src/todo_sync/connectors/console_view.py

"""Console implementations of the TaskView and Navigator ports."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from typing import TextIO

from ..auth.session import Session
from ..core.errors import AuthMissingError, AuthRejectedError, TaskSyncError
from ..tasks.task_models import FilterMode, Task
from ..tasks.task_view import TaskActions

logger = logging.getLogger(__name__)


def ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def friendly_error_message(err: TaskSyncError) -> str:
    msg = (err.message or "").strip() or "Something went wrong."
    if isinstance(err, (AuthMissingError, AuthRejectedError)):
        return f"{msg} Use /logout and log in again."
    return msg


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}. {task.title}"
    if task.details:
        line += f": {task.details}"
    return line


class ConsoleView:
    """
    Prints the visible tasks after every store change.

    Renders are de-duplicated: busy-status snapshots carry the same tasks, and
    the console only needs to redraw when the content changed.
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self._last: tuple | None = None
        self.actions: TaskActions | None = None

    def _print(self, text: str) -> None:
        print(text, file=self._out or sys.stdout, flush=True)

    def render(
            self,
            tasks: Sequence[Task],
            actions: TaskActions,
            *,
            filter_mode: FilterMode,
            error: TaskSyncError | None,
    ) -> None:
        self.actions = actions
        key = (tuple(tasks), filter_mode, error)
        if key == self._last:
            return
        self._last = key

        lines = [f"[{ts_local()}] Tasks ({filter_mode.value}, {len(tasks)} shown):"]
        if tasks:
            lines.extend(f"  {format_task(t)}" for t in tasks)
        else:
            lines.append("  (no tasks)")
        if error is not None:
            lines.append(f"  ! {friendly_error_message(error)}")
        self._print("\n".join(lines))


class ConsoleNavigator:
    """There is only one console "screen"; navigation is a status line."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self.location = "login"

    def to_home(self, session: Session) -> None:
        self.location = "home"
        logger.debug("Navigate -> home user=%s", session.username)
        print(f"[{ts_local()}] Logged in as {session.username}.", file=self._out or sys.stdout, flush=True)

    def to_login(self) -> None:
        self.location = "login"
        logger.debug("Navigate -> login")
        print(f"[{ts_local()}] Logged out.", file=self._out or sys.stdout, flush=True)
