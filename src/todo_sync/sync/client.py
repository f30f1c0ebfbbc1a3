# src/todo_sync/sync/client.py

"""
SyncClient: the five remote task verbs over the backend's REST contract.

    GET    /todos              -> [Task]
    POST   /todos              {title, details} -> Task
    PUT    /todos/{id}         {title, details} -> Task
    DELETE /todos/{id}         -> ack
    PUT    /todos/{id}/toggle  {completed} -> Task

Every call is a single round trip with a bearer token. No retries, no caching.
Failures are raised as RemoteError subclasses (see core.errors).
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import InvalidResponseError
from ..tasks.task_models import Task, TaskId
from .http import bearer, decode_json, send

logger = logging.getLogger(__name__)

MSG_LIST = "Failed to fetch tasks"
MSG_CREATE = "Failed to add task"
MSG_UPDATE = "Failed to update task"
MSG_DELETE = "Failed to delete task"
MSG_TOGGLE = "Failed to update task status"


def _task_path(task_id: TaskId) -> str:
    return f"/todos/{quote(str(task_id), safe='')}"


def _decode_task(body: Any, message: str, status_code: int) -> Task:
    try:
        return Task.from_json(body)
    except ValueError as e:
        raise InvalidResponseError(f"{message}: {e}", status_code=status_code) from e


class SyncClient:
    """Implements the TaskGateway port on top of an httpx.AsyncClient."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def list_tasks(self, token: str) -> list[Task]:
        resp = await send(self._http, "GET", "/todos", message=MSG_LIST, headers=bearer(token))
        body = decode_json(resp, MSG_LIST)
        if not isinstance(body, list):
            raise InvalidResponseError(f"{MSG_LIST}: expected a JSON array", status_code=resp.status_code)

        tasks = [_decode_task(item, MSG_LIST, resp.status_code) for item in body]
        logger.debug("Fetched %d tasks", len(tasks))
        return tasks

    async def create_task(self, token: str, title: str, details: str) -> Task:
        resp = await send(
            self._http,
            "POST",
            "/todos",
            message=MSG_CREATE,
            headers=bearer(token),
            json={"title": title, "details": details},
        )
        task = _decode_task(decode_json(resp, MSG_CREATE), MSG_CREATE, resp.status_code)
        logger.debug("Created task id=%s", task.id)
        return task

    async def update_task(self, token: str, task_id: TaskId, title: str, details: str) -> Task:
        resp = await send(
            self._http,
            "PUT",
            _task_path(task_id),
            message=MSG_UPDATE,
            headers=bearer(token),
            json={"title": title, "details": details},
        )
        return _decode_task(decode_json(resp, MSG_UPDATE), MSG_UPDATE, resp.status_code)

    async def delete_task(self, token: str, task_id: TaskId) -> None:
        # Any 2xx is an ack; the body (if any) is ignored.
        await send(self._http, "DELETE", _task_path(task_id), message=MSG_DELETE, headers=bearer(token))

    async def toggle_task(self, token: str, task_id: TaskId, current_completed: bool) -> Task:
        resp = await send(
            self._http,
            "PUT",
            f"{_task_path(task_id)}/toggle",
            message=MSG_TOGGLE,
            headers=bearer(token),
            json={"completed": not current_completed},
        )
        return _decode_task(decode_json(resp, MSG_TOGGLE), MSG_TOGGLE, resp.status_code)
