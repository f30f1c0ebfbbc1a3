# src/todo_sync/auth/session.py

"""
Session value + the token provider the task store reads from.

A Session exists between a successful login and the matching logout.
It can be persisted to a private JSON file so a restart does not require
logging in again.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Session:
    username: str
    token: str

    def get_token(self) -> str | None:
        # Opaque: sent exactly as issued; only an empty token is absent.
        return self.token or None

    def __repr__(self) -> str:
        # Never print the token.
        return f"Session(username={self.username!r})"


class SessionHolder:
    """
    Mutable slot for the current Session.

    Written only by login/logout; the task store only reads it via get_token().
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def username(self) -> str | None:
        return self._session.username if self._session is not None else None

    @property
    def is_active(self) -> bool:
        return self.get_token() is not None

    def get_token(self) -> str | None:
        if self._session is None:
            return None
        return self._session.get_token()

    def activate(self, session: Session) -> None:
        if self._session is not None:
            raise RuntimeError(f"A session is already active for {self._session.username!r}; log out first.")
        self._session = session
        logger.info("Session started user=%s", session.username)

    def clear(self) -> Session | None:
        prev = self._session
        self._session = None
        if prev is not None:
            logger.info("Session ended user=%s", prev.username)
        return prev


def _load_json(path: Path) -> dict[str, Any]:
    val = json.loads(path.read_text("utf-8"))
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def load_session_file(path: str | Path) -> Session | None:
    """Best-effort: a missing or malformed file means "not logged in"."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        data = _load_json(path)
    except Exception:
        logger.warning("Ignoring unreadable session file %s", path, exc_info=True)
        return None

    username = data.get("username")
    token = data.get("token")
    if not isinstance(username, str) or not isinstance(token, str) or not token:
        logger.warning("Ignoring session file %s: missing username/token", path)
        return None

    return Session(username=username, token=token)


def save_session_file(path: str | Path, session: Session) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(
        json.dumps({"username": session.username, "token": session.token}, ensure_ascii=False),
        "utf-8",
    )
    os.replace(tmp, path)
    with contextlib.suppress(Exception):
        # The file holds a bearer token.
        os.chmod(path, 0o600)
    logger.debug("Session saved to %s", path)


def delete_session_file(path: str | Path) -> None:
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Failed to remove session file %s", path, exc_info=True)
