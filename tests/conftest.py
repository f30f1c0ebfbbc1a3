# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

from todo_sync.auth.session import Session, SessionHolder
from todo_sync.core.state import AppState
from todo_sync.tasks.task_models import Task
from todo_sync.tasks.task_store import TaskStore

from .fakes import FakeAuthenticator, FakeGateway, FakeNavigator, RecordingView


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-sync-test",
        api_base_url="http://api.test",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        operation_timeout_seconds=1.0,
        serialize_mutations=True,
        default_username="",
        remember_session=True,
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
    )


@pytest.fixture()
def session() -> Session:
    return Session(username="alice", token="tok-123")


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway([Task(id=1, title="X", details="Y", completed=False)])


@pytest.fixture()
def store(gateway: FakeGateway, session: Session) -> TaskStore:
    return TaskStore(gateway, session, operation_timeout=1.0)


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: FakeGateway) -> AppState:
    """
    AppState wired with deterministic fakes.

    The http client is never used by the fakes; it only exists so shutdown has something to close.
    """
    return AppState(
        settings=settings,
        http=httpx.AsyncClient(base_url=settings.api_base_url),
        gateway=gateway,
        authenticator=FakeAuthenticator(),
        session=SessionHolder(),
        navigator=FakeNavigator(),
        view=RecordingView(),
    )
