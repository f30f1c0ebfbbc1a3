# src/todo_sync/core/ports.py

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps the HTTP backend, the session source and the display layer
swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..auth.session import Session
    from ..tasks.task_models import FilterMode, Task, TaskId
    from ..tasks.task_view import TaskActions
    from .errors import TaskSyncError


class TokenProvider(Protocol):
    """Supplies the current session token (None when logged out)."""

    def get_token(self) -> str | None: ...


class TaskGateway(Protocol):
    """
    Remote task operations. One round trip per call, no retries.

    Implementations raise RemoteError subclasses on failure.
    """

    async def list_tasks(self, token: str) -> list[Task]: ...

    async def create_task(self, token: str, title: str, details: str) -> Task: ...

    async def update_task(self, token: str, task_id: TaskId, title: str, details: str) -> Task: ...

    async def delete_task(self, token: str, task_id: TaskId) -> None: ...

    async def toggle_task(self, token: str, task_id: TaskId, current_completed: bool) -> Task: ...


class Authenticator(Protocol):
    async def login(self, username: str, password: str) -> Session: ...


class Navigator(Protocol):
    """Screen routing. Invoked on login/logout only."""

    def to_home(self, session: Session) -> None: ...

    def to_login(self) -> None: ...


class TaskView(Protocol):
    """Display layer: draws the visible tasks and wires user actions to callbacks."""

    def render(
            self,
            tasks: Sequence[Task],
            actions: TaskActions,
            *,
            filter_mode: FilterMode,
            error: TaskSyncError | None,
    ) -> None: ...
