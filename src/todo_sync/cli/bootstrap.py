# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (HTTP client, sync client, auth, console UI),
- persists the session token between runs (optional),
- opens/closes one TaskStore per logged-in session.
"""

from __future__ import annotations

import logging

from ..auth.authenticator import HttpAuthenticator
from ..auth.session import (
    Session,
    SessionHolder,
    delete_session_file,
    load_session_file,
    save_session_file,
)
from ..config import get_settings
from ..connectors.console_view import ConsoleNavigator, ConsoleView
from ..core.state import AppState
from ..sync.client import SyncClient
from ..sync.http import create_http_client
from ..tasks.task_store import TaskStore
from ..tasks.task_view import bind_view

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    http = create_http_client(settings)
    return AppState(
        settings=settings,
        http=http,
        gateway=SyncClient(http),
        authenticator=HttpAuthenticator(http),
        session=SessionHolder(),
        navigator=ConsoleNavigator(),
        view=ConsoleView(),
    )


def restore_session(state: AppState) -> Session | None:
    """Re-activate a remembered session, if any. The token is re-validated by the first load()."""
    if not getattr(state.settings, "remember_session", False):
        return None
    if state.session.is_active:
        return state.session.session
    session = load_session_file(state.settings.session_path)
    if session is None:
        return None
    state.session.activate(session)
    logger.info("Restored session for user=%s", session.username)
    return session


def remember_session(state: AppState) -> None:
    session = state.session.session
    if session is None or not getattr(state.settings, "remember_session", False):
        return
    try:
        save_session_file(state.settings.session_path, session)
    except Exception:
        logger.exception("Failed to save session to %s", state.settings.session_path)


def forget_session(state: AppState) -> None:
    delete_session_file(state.settings.session_path)


def open_task_store(state: AppState) -> TaskStore:
    """Build the TaskStore for the active session and bind the view to it."""
    close_task_store(state)

    settings = state.settings
    store = TaskStore(
        state.gateway,
        state.session,
        operation_timeout=getattr(settings, "operation_timeout_seconds", 15.0),
        serialize_mutations=bool(getattr(settings, "serialize_mutations", True)),
    )
    state.store = store
    state.unbind_view = bind_view(store, state.view)
    return store


def close_task_store(state: AppState) -> None:
    if state.unbind_view is not None:
        state.unbind_view()
    state.unbind_view = None
    state.store = None


async def login(state: AppState, username: str, password: str) -> Session:
    """
    Authenticate, start the session and go home.

    Raises TaskSyncError subclasses on failure (the caller shows the message).
    """
    session = await state.authenticator.login(username, password)
    state.session.activate(session)
    remember_session(state)
    state.navigator.to_home(session)
    return session


def logout(state: AppState) -> None:
    close_task_store(state)
    state.session.clear()
    forget_session(state)
    state.navigator.to_login()


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    close_task_store(state)
    try:
        await state.http.aclose()
    except Exception:
        logger.debug("HTTP client close failed.", exc_info=True)
