# src/todo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time (the token comes from login, not from env).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Backend ----
    api_base_url: str
    connect_timeout_seconds: float
    read_timeout_seconds: float

    # ---- Task store ----
    operation_timeout_seconds: float | None
    serialize_mutations: bool

    # ---- Session ----
    default_username: str
    remember_session: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    session_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="todo-sync") or "todo-sync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        api_base_url = (
            _first_env(_k("API_BASE_URL"), "API_BASE_URL", default="http://localhost:8000")
            or "http://localhost:8000"
        ).strip().rstrip("/")

        connect_timeout = _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("READ_TIMEOUT_SECONDS"), 10.0)

        # <= 0 disables the per-operation deadline.
        op_timeout: float | None = _env_float(_k("OPERATION_TIMEOUT_SECONDS"), 15.0)
        if op_timeout is not None and op_timeout <= 0:
            op_timeout = None

        serialize_mutations = _env_bool(_k("SERIALIZE_MUTATIONS"), True)

        default_username = _env(_k("USERNAME"), "").strip()
        remember_session = _env_bool(_k("REMEMBER_SESSION"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo_sync"))
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            connect_timeout_seconds=connect_timeout,
            read_timeout_seconds=read_timeout,
            operation_timeout_seconds=op_timeout,
            serialize_mutations=serialize_mutations,
            default_username=default_username,
            remember_session=remember_session,
            data_dir=data_dir,
            session_path=session_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
