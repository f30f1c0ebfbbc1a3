# src/todo_sync/sync/http.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import (
    AuthRejectedError,
    InvalidResponseError,
    NetworkError,
    RemoteClientError,
    RemoteError,
    RemoteServerError,
)

logger = logging.getLogger(__name__)


def create_http_client(settings: Any) -> httpx.AsyncClient:
    """
    Build the shared AsyncClient for the backend.

    Timeouts are configurable via env so a stuck backend cannot hang a call forever.
    """
    connect_s = float(getattr(settings, "connect_timeout_seconds", 5.0))
    read_s = float(getattr(settings, "read_timeout_seconds", 10.0))

    timeout = httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )
    return httpx.AsyncClient(
        base_url=str(settings.api_base_url),
        timeout=timeout,
        headers={"Accept": "application/json"},
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _server_detail(response: httpx.Response) -> str | None:
    """FastAPI-style {"detail": "..."} error bodies; anything else is ignored."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail.strip():
            return detail.strip()
    return None


def error_for_response(response: httpx.Response, message: str) -> RemoteError:
    """Map a non-2xx response to a typed failure."""
    status = response.status_code
    detail = _server_detail(response)
    text = f"{message}: {detail}" if detail else f"{message} (HTTP {status})"

    if status in (401, 403):
        return AuthRejectedError(text, status_code=status)
    if 400 <= status < 500:
        return RemoteClientError(text, status_code=status)
    return RemoteServerError(text, status_code=status)


async def send(
        http: httpx.AsyncClient,
        method: str,
        path: str,
        *,
        message: str,
        headers: dict[str, str] | None = None,
        json: Any = None,
) -> httpx.Response:
    """
    One round trip. Returns the response only when it is 2xx.

    Raises NetworkError on transport failure, RemoteError on non-2xx.
    """
    try:
        response = await http.request(method, path, headers=headers, json=json)
    except httpx.TimeoutException as e:
        raise NetworkError(f"{message}: request timed out") from e
    except httpx.TransportError as e:
        raise NetworkError(f"{message}: {e.__class__.__name__}") from e

    if not response.is_success:
        err = error_for_response(response, message)
        logger.info("%s %s -> %s", method, path, response.status_code)
        raise err

    return response


def decode_json(response: httpx.Response, message: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise InvalidResponseError(
            f"{message}: response is not valid JSON",
            status_code=response.status_code,
        ) from e
