# src/todo_sync/auth/authenticator.py

from __future__ import annotations

import logging

import httpx

from ..core.errors import AuthRejectedError, InvalidResponseError, ValidationError
from ..sync.http import decode_json, send
from .session import Session

logger = logging.getLogger(__name__)

MSG_LOGIN = "Login failed"


class HttpAuthenticator:
    """Exchanges username/password for a bearer token via POST /auth/login."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def login(self, username: str, password: str) -> Session:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Enter both a username and a password.")

        try:
            resp = await send(
                self._http,
                "POST",
                "/auth/login",
                message=MSG_LOGIN,
                json={"username": username, "password": password},
            )
        except AuthRejectedError as e:
            logger.info("Login rejected for user=%s (HTTP %s)", username, e.status_code)
            raise AuthRejectedError(
                "Login failed. Check your username and password.",
                status_code=e.status_code,
            ) from e

        body = decode_json(resp, MSG_LOGIN)
        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise InvalidResponseError(f"{MSG_LOGIN}: response has no token", status_code=resp.status_code)

        logger.info("Logged in user=%s", username)
        return Session(username=username, token=token)
