# src/todo_sync/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..connectors.console_view import format_task, friendly_error_message
from ..core.state import AppState
from ..tasks.task_models import FilterMode, TaskId
from ..tasks.task_store import TaskStore
from . import bootstrap

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "Not logged in."


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task_id(store: TaskStore, raw: str) -> TaskId:
    """
    Map a typed id to a collection id by its string form.

    Unknown ids are passed through (int when numeric) so the server decides.
    """
    raw = raw.strip()
    for t in store.tasks:
        if str(t.id) == raw:
            return t.id
    try:
        return int(raw)
    except ValueError:
        return raw


def _split_title_details(text: str) -> tuple[str, str]:
    title, sep, details = text.partition("|")
    if not sep:
        return title.strip(), ""
    return title.strip(), details.strip()


def _failure(store: TaskStore) -> str:
    err = store.last_error
    return friendly_error_message(err) if err is not None else "Operation failed."


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    user = state.session.username or "(not logged in)"
    base_url = getattr(state.settings, "api_base_url", "?")
    lines = [
        "Status:",
        f"  User: {user}",
        f"  Backend: {base_url}",
    ]
    store = state.store
    if store is not None:
        lines.append(f"  Store: {store.status.value}, {len(store.tasks)} tasks, filter={store.filter_mode.value}")
        if store.last_error is not None:
            lines.append(f"  Last error: {friendly_error_message(store.last_error)}")
    return "\n".join(lines)


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if not store.visible:
        return f"No tasks ({store.filter_mode.value})."
    return "\n".join(format_task(t) for t in store.visible)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title> | <details>
    """
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    title, details = _split_title_details(" ".join(args))
    task = await store.add_task(title, details)
    if task is None:
        return _failure(store)
    return f"Added task {task.id}."


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> <title> | <details>
    """
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if not args:
        return "Usage: /edit <id> <title> | <details>"
    task_id = resolve_task_id(store, args[0])
    title, details = _split_title_details(" ".join(args[1:]))
    task = await store.update_task(task_id, title, details)
    if task is None:
        return _failure(store)
    return f"Updated task {task.id}."


async def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if len(args) != 1:
        return "Usage: /toggle <id>"
    task = await store.toggle_task(resolve_task_id(store, args[0]))
    if task is None:
        return _failure(store)
    return f"Task {task.id} is now {'done' if task.completed else 'open'}."


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if len(args) != 1:
        return "Usage: /delete <id>"
    task_id = resolve_task_id(store, args[0])
    if not await store.delete_task(task_id):
        return _failure(store)
    return f"Deleted task {task_id}."


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /filter              -> show current filter
    /filter all|completed|incomplete
    """
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if not args:
        return f"Filter is {store.filter_mode.value}. Use /filter all | completed | incomplete."
    try:
        mode = FilterMode.parse(args[0])
    except ValueError as e:
        return str(e)
    store.set_filter(mode)
    return f"Filter set to {mode.value}."


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = state.store
    if store is None:
        return NOT_LOGGED_IN
    if emit:
        emit("Loading tasks...")
    if not await store.load():
        return _failure(store)
    return f"Loaded {len(store.tasks)} tasks."


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.session.is_active:
        return NOT_LOGGED_IN
    user = state.session.username
    bootstrap.logout(state)
    logger.debug("Logout requested user=%s", user)
    return "Bye."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session and store status.")
registry.register("list", cmd_list, help_text="List visible tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> | <details>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> | <details>.")
registry.register("toggle", cmd_toggle, help_text="Mark a task done/open: /toggle <id>.", aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["del", "rm"])
registry.register("filter", cmd_filter, help_text="Filter tasks: /filter all | completed | incomplete.")
registry.register("reload", cmd_reload, help_text="Fetch the task list from the server again.")
registry.register("logout", cmd_logout, help_text="End the session.")
