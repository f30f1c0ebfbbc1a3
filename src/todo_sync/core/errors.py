# src/todo_sync/core/errors.py

"""
Typed failures shared by the sync client, the authenticator and the task store.

Local failures (ValidationError, AuthMissingError) are raised before any
network call. Remote failures are derived from the HTTP outcome.
"""

from __future__ import annotations

from enum import StrEnum


class FailureKind(StrEnum):
    VALIDATION = "validation"
    AUTH_MISSING = "auth_missing"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"


class TaskSyncError(Exception):
    """Base class for every failure the task store can record."""

    kind: FailureKind = FailureKind.CLIENT_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code!r})"


class ValidationError(TaskSyncError):
    """A required field is empty. Never sent to the server."""

    kind = FailureKind.VALIDATION


class AuthMissingError(TaskSyncError):
    """No session token is available."""

    kind = FailureKind.AUTH_MISSING


class RemoteError(TaskSyncError):
    """The remote call was attempted and did not succeed."""


class RemoteClientError(RemoteError):
    kind = FailureKind.CLIENT_ERROR


class AuthRejectedError(RemoteClientError):
    """The server refused the credentials or the token (401/403)."""


class RemoteServerError(RemoteError):
    kind = FailureKind.SERVER_ERROR


class InvalidResponseError(RemoteServerError):
    """2xx response whose body could not be decoded into the expected shape."""


class NetworkError(RemoteError):
    kind = FailureKind.NETWORK_ERROR
