# tests/test_sync_client.py

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from todo_sync.core.errors import (
    AuthRejectedError,
    FailureKind,
    InvalidResponseError,
    NetworkError,
    RemoteClientError,
    RemoteServerError,
)
from todo_sync.sync.client import SyncClient
from todo_sync.tasks.task_models import Task

BASE_URL = "http://api.test"
TASK_JSON = {"id": 7, "title": "X", "details": "Y", "completed": False}

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that records requests and replies with a canned response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


def _http(handler: Handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_sends_bearer_and_decodes() -> None:
    rec = Recorder(httpx.Response(200, json=[TASK_JSON]))
    async with _http(rec) as http:
        tasks = await SyncClient(http).list_tasks("tok")

    assert tasks == [Task(id=7, title="X", details="Y", completed=False)]
    assert rec.last.method == "GET"
    assert rec.last.url.path == "/todos"
    assert rec.last.headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_create_task_posts_title_and_details() -> None:
    rec = Recorder(httpx.Response(201, json=TASK_JSON))
    async with _http(rec) as http:
        task = await SyncClient(http).create_task("tok", "X", "Y")

    assert task.id == 7
    assert rec.last.method == "POST"
    assert rec.last.url.path == "/todos"
    assert rec.last_json() == {"title": "X", "details": "Y"}


@pytest.mark.asyncio
async def test_update_task_puts_to_item_path() -> None:
    rec = Recorder(httpx.Response(200, json={**TASK_JSON, "title": "X2"}))
    async with _http(rec) as http:
        task = await SyncClient(http).update_task("tok", 7, "X2", "Y")

    assert task.title == "X2"
    assert rec.last.method == "PUT"
    assert rec.last.url.path == "/todos/7"
    assert rec.last_json() == {"title": "X2", "details": "Y"}


@pytest.mark.asyncio
async def test_toggle_sends_negated_flag_and_returns_server_value() -> None:
    # Server answers completed=False even though we asked for True.
    rec = Recorder(httpx.Response(200, json=TASK_JSON))
    async with _http(rec) as http:
        task = await SyncClient(http).toggle_task("tok", 7, False)

    assert rec.last.method == "PUT"
    assert rec.last.url.path == "/todos/7/toggle"
    assert rec.last_json() == {"completed": True}
    assert task.completed is False


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [httpx.Response(204), httpx.Response(200, json={"ok": True})])
async def test_delete_accepts_any_2xx(response: httpx.Response) -> None:
    rec = Recorder(response)
    async with _http(rec) as http:
        assert await SyncClient(http).delete_task("tok", 7) is None

    assert rec.last.method == "DELETE"
    assert rec.last.url.path == "/todos/7"


@pytest.mark.asyncio
async def test_404_is_client_error_with_server_detail() -> None:
    rec = Recorder(httpx.Response(404, json={"detail": "Task not found"}))
    async with _http(rec) as http:
        with pytest.raises(RemoteClientError) as ei:
            await SyncClient(http).delete_task("tok", 99)

    err = ei.value
    assert err.kind == FailureKind.CLIENT_ERROR
    assert err.status_code == 404
    assert err.message == "Failed to delete task: Task not found"


@pytest.mark.asyncio
async def test_401_is_auth_rejected() -> None:
    rec = Recorder(httpx.Response(401, json={"detail": "Invalid token"}))
    async with _http(rec) as http:
        with pytest.raises(AuthRejectedError) as ei:
            await SyncClient(http).list_tasks("bad")

    assert isinstance(ei.value, RemoteClientError)
    assert ei.value.status_code == 401


@pytest.mark.asyncio
async def test_500_is_server_error() -> None:
    rec = Recorder(httpx.Response(500, text="boom"))
    async with _http(rec) as http:
        with pytest.raises(RemoteServerError) as ei:
            await SyncClient(http).create_task("tok", "a", "b")

    assert ei.value.kind == FailureKind.SERVER_ERROR
    assert ei.value.message == "Failed to add task (HTTP 500)"


@pytest.mark.asyncio
async def test_transport_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _http(handler) as http:
        with pytest.raises(NetworkError) as ei:
            await SyncClient(http).list_tasks("tok")

    assert ei.value.kind == FailureKind.NETWORK_ERROR
    assert ei.value.status_code is None


@pytest.mark.asyncio
async def test_timeout_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with _http(handler) as http:
        with pytest.raises(NetworkError, match="timed out"):
            await SyncClient(http).toggle_task("tok", 1, True)


@pytest.mark.asyncio
async def test_unparseable_success_body_is_failure() -> None:
    rec = Recorder(httpx.Response(200, text="<html>not json</html>"))
    async with _http(rec) as http:
        with pytest.raises(InvalidResponseError):
            await SyncClient(http).update_task("tok", 1, "a", "b")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"id": 1, "title": "a", "details": "b"},
        {"id": True, "title": "a", "details": "b", "completed": False},
        {"id": 1, "title": "a", "details": "b", "completed": "yes"},
        [TASK_JSON],
    ],
)
async def test_wrong_task_shape_is_failure(body) -> None:
    rec = Recorder(httpx.Response(200, json=body))
    async with _http(rec) as http:
        with pytest.raises(InvalidResponseError) as ei:
            await SyncClient(http).toggle_task("tok", 1, False)

    assert ei.value.kind == FailureKind.SERVER_ERROR


@pytest.mark.asyncio
async def test_list_requires_array() -> None:
    rec = Recorder(httpx.Response(200, json={"items": [TASK_JSON]}))
    async with _http(rec) as http:
        with pytest.raises(InvalidResponseError, match="expected a JSON array"):
            await SyncClient(http).list_tasks("tok")


@pytest.mark.asyncio
async def test_string_ids_are_path_quoted() -> None:
    rec = Recorder(httpx.Response(200, json={**TASK_JSON, "id": "a/b"}))
    async with _http(rec) as http:
        task = await SyncClient(http).update_task("tok", "a/b", "X", "Y")

    assert task.id == "a/b"
    assert rec.last.url.raw_path == b"/todos/a%2Fb"
