# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import getpass
import logging
import threading
from collections.abc import Callable

from ..cli import bootstrap
from ..cli.commands import registry as command_registry
from ..core.errors import AuthMissingError, AuthRejectedError, TaskSyncError
from ..core.state import AppState
from .console_view import friendly_error_message, ts_local

logger = logging.getLogger(__name__)


def _print_ts(text: str) -> None:
    print(f"[{ts_local()}] {text}", flush=True)


async def read_line(prompt: str, reader: Callable[[str], str] = input) -> str:
    """
    Read one console line without blocking the event loop.

    The reader runs in a daemon thread so an interrupted prompt never keeps
    the process alive at exit. EOFError from the reader is re-raised here.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(value: str | None, exc: Exception | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(value or "")

    def worker() -> None:
        try:
            line = reader(prompt)
        except Exception as e:
            result: tuple[str | None, Exception | None] = (None, e)
        else:
            result = (line, None)
        # The loop may already be closed if the app exited mid-prompt.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(deliver, *result)

    threading.Thread(target=worker, name="console-input", daemon=True).start()
    return await fut


async def _login_prompt(state: AppState) -> bool:
    """Ask for credentials once. Returns True when a session was started."""
    default_user = str(getattr(state.settings, "default_username", "") or "")
    hint = f" [{default_user}]" if default_user else ""

    username = (await read_line(f"Username{hint}: ")).strip() or default_user
    password = await read_line("Password: ", getpass.getpass)

    try:
        await bootstrap.login(state, username, password)
    except TaskSyncError as e:
        logger.info("Login failed: %s", e.message)
        _print_ts(friendly_error_message(e))
        return False
    return True


async def _open_home(state: AppState) -> None:
    store = bootstrap.open_task_store(state)
    if await store.load():
        return
    # A remembered token may have expired: drop it and go back to login.
    if isinstance(store.last_error, (AuthRejectedError, AuthMissingError)):
        logger.info("Stored session rejected by the server; logging out.")
        bootstrap.logout(state)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (backend=%s).", getattr(state.settings, "api_base_url", "?"))
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations.
        print(f"[{ts_local()}] {text}", flush=True)

    restored = bootstrap.restore_session(state)
    if restored is not None:
        state.navigator.to_home(restored)

    while True:
        try:
            if not state.session.is_active:
                if not await _login_prompt(state):
                    continue

            if state.store is None:
                await _open_home(state)
                continue

            user_input = (await read_line(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Not a command. Use /add <title> | <details> to add a task, /help for more."

        if reply:
            _print_ts(reply)

    logger.info("Console connector finished.")
