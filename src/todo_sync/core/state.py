# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from ..auth.session import SessionHolder
from ..tasks.task_store import TaskStore
from .ports import Authenticator, Navigator, TaskGateway, TaskView


@dataclass
class AppState:
    """Everything a front-end needs, wired once by cli.bootstrap."""

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    http: httpx.AsyncClient
    gateway: TaskGateway
    authenticator: Authenticator
    session: SessionHolder
    navigator: Navigator
    view: TaskView

    # One TaskStore per logged-in session; None while logged out.
    store: TaskStore | None = None
    unbind_view: Any = field(default=None, repr=False)
