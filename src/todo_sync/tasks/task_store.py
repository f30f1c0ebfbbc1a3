# src/todo_sync/tasks/task_store.py

"""
TaskStore: the client-side source of truth for the task list.

- owns the task collection (an immutable tuple, replaced only on success),
- issues remote operations through an injected TaskGateway,
- applies server responses (the server's Task is always canonical),
- records the last failure instead of raising it,
- re-derives the filtered view and notifies subscribers after every change.

Key invariants:
- a failed operation never touches the collection (same tuple object before and after),
- ids are unique within the collection,
- no optimistic updates: visible state changes only after the server confirms.

Concurrency:
- with serialize_mutations=True every remote operation runs under one asyncio.Lock,
  so results are applied in call order;
- with serialize_mutations=False operations race and apply in response order.
- every remote call is bounded by operation_timeout (None disables); expiry is a NetworkError.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from ..core.errors import AuthMissingError, NetworkError, TaskSyncError, ValidationError
from ..core.ports import TaskGateway, TokenProvider
from .filtering import apply_filter
from .task_models import FilterMode, StoreSnapshot, StoreStatus, Task, TaskId

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[StoreSnapshot], None]

DEFAULT_OPERATION_TIMEOUT_SECONDS = 15.0


def _dedupe(tasks: Iterable[Task]) -> tuple[Task, ...]:
    # Keep first position, last value.
    by_id: dict[TaskId, Task] = {}
    for t in tasks:
        by_id[t.id] = t
    return tuple(by_id.values())


class TaskStore:
    def __init__(
            self,
            gateway: TaskGateway,
            tokens: TokenProvider,
            *,
            filter_mode: FilterMode = FilterMode.ALL,
            operation_timeout: float | None = DEFAULT_OPERATION_TIMEOUT_SECONDS,
            serialize_mutations: bool = True,
    ) -> None:
        self._gateway = gateway
        self._tokens = tokens
        self._timeout = operation_timeout
        self._lock: asyncio.Lock | None = asyncio.Lock() if serialize_mutations else None

        self._tasks: tuple[Task, ...] = ()
        self._filter_mode = filter_mode
        self._visible: tuple[Task, ...] = ()
        self._status = StoreStatus.UNINITIALIZED
        self._error: TaskSyncError | None = None
        self._in_flight = 0

        self._listeners: list[Listener] = []

    # ---- read-only state ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def visible(self) -> tuple[Task, ...]:
        return self._visible

    @property
    def filter_mode(self) -> FilterMode:
        return self._filter_mode

    @property
    def status(self) -> StoreStatus:
        return self._status

    @property
    def last_error(self) -> TaskSyncError | None:
        return self._error

    def get(self, task_id: TaskId) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            tasks=self._tasks,
            visible=self._visible,
            filter_mode=self._filter_mode,
            status=self._status,
            error=self._error,
        )

    # ---- observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a snapshot listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("TaskStore listener failed: %r", listener)

    # ---- internal state transitions ----

    def _set_tasks(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._visible = tuple(apply_filter(self._tasks, self._filter_mode))

    def _settle(self) -> None:
        if self._in_flight > 0:
            return
        self._status = StoreStatus.ERROR if self._error is not None else StoreStatus.READY

    def _reject(self, op: str, err: TaskSyncError) -> None:
        """Local failure (validation/auth): no network call was made."""
        logger.info("%s rejected: %s", op, err.message)
        self._error = err
        self._settle()
        self._notify()

    async def _bounded(self, op: str, awaitable: Awaitable[T]) -> T:
        if self._timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise NetworkError(f"{op} timed out after {self._timeout:g}s") from e

    async def _run(
            self,
            op: str,
            busy: StoreStatus,
            call: Callable[[str], Awaitable[T]],
            apply: Callable[[T], None],
    ) -> tuple[bool, T | None]:
        """
        Run one remote operation with the store's lock/timeout policy.

        Returns (ok, result). Operational failures are recorded, not raised.
        """
        lock: Any = self._lock if self._lock is not None else contextlib.nullcontext()
        async with lock:
            token = self._tokens.get_token()
            if not token:
                self._reject(op, AuthMissingError("You are not logged in."))
                return False, None

            self._in_flight += 1
            self._status = busy
            self._notify()

            try:
                result = await self._bounded(op, call(token))
            except TaskSyncError as e:
                self._in_flight -= 1
                self._error = e
                self._settle()
                logger.warning("%s failed: %s", op, e.message)
                self._notify()
                return False, None
            except BaseException:
                # Cancellation or a bug: restore a consistent status and propagate.
                self._in_flight -= 1
                self._settle()
                self._notify()
                raise

            self._in_flight -= 1
            apply(result)
            self._error = None
            self._settle()
            self._notify()
            return True, result

    # ---- operations ----

    async def load(self) -> bool:
        """Fetch the full collection and replace the local one wholesale."""

        def apply(tasks: list[Task]) -> None:
            self._set_tasks(_dedupe(tasks))
            logger.info("Loaded %d tasks", len(self._tasks))

        ok, _ = await self._run("Load tasks", StoreStatus.LOADING, self._gateway.list_tasks, apply)
        return ok

    async def add_task(self, title: str, details: str) -> Task | None:
        """
        Create a task on the server and append it.

        Empty title or details fail locally with a ValidationError.
        Returns the created Task (the caller resets its form), or None on failure.
        """
        if not title or not details:
            self._reject("Add task", ValidationError("Enter both a title and details."))
            return None

        def apply(task: Task) -> None:
            if self.get(task.id) is not None:
                self._set_tasks(task if t.id == task.id else t for t in self._tasks)
            else:
                self._set_tasks((*self._tasks, task))
            logger.info("Task %s added", task.id)

        ok, task = await self._run(
            "Add task",
            StoreStatus.MUTATING,
            lambda token: self._gateway.create_task(token, title, details),
            apply,
        )
        return task if ok else None

    async def delete_task(self, task_id: TaskId) -> bool:
        """Delete on the server, then drop the entry locally. Unknown ids are the server's call."""

        def apply(_: None) -> None:
            self._set_tasks(t for t in self._tasks if t.id != task_id)
            logger.info("Task %s deleted", task_id)

        ok, _ = await self._run(
            "Delete task",
            StoreStatus.MUTATING,
            lambda token: self._gateway.delete_task(token, task_id),
            apply,
        )
        return ok

    async def update_task(self, task_id: TaskId, title: str, details: str) -> Task | None:
        """Send new title/details as-is; the server's Task replaces the local entry in place."""
        ok, task = await self._run(
            "Update task",
            StoreStatus.MUTATING,
            lambda token: self._gateway.update_task(token, task_id, title, details),
            lambda task: self._replace(task_id, task),
        )
        return task if ok else None

    async def toggle_task(self, task_id: TaskId) -> Task | None:
        """
        Flip completion on the server.

        The request carries the negation of the current local value; the server's
        echoed `completed` is written back as-is. An id that is not loaded locally
        fails with a ValidationError before any token check or network call.
        """
        known = self.get(task_id)
        if known is None:
            self._reject("Toggle task", ValidationError(f"Unknown task id: {task_id}"))
            return None

        async def call(token: str) -> Task:
            # Re-read under the lock so a preceding mutation is visible.
            current = self.get(task_id) or known
            return await self._gateway.toggle_task(token, task_id, current.completed)

        ok, task = await self._run(
            "Toggle task",
            StoreStatus.MUTATING,
            call,
            lambda task: self._replace(task_id, task),
        )
        return task if ok else None

    def set_filter(self, mode: FilterMode) -> None:
        """Local only; never fails and leaves last_error alone."""
        self._filter_mode = FilterMode(mode)
        self._visible = tuple(apply_filter(self._tasks, self._filter_mode))
        logger.debug("Filter -> %s (%d visible)", self._filter_mode, len(self._visible))
        self._notify()

    def _replace(self, task_id: TaskId, task: Task) -> None:
        if self.get(task_id) is None:
            # Only entries already in the collection are replaced.
            logger.debug("Task %s updated on the server but not loaded locally; collection unchanged", task_id)
            return

        out: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                out.append(task)
            elif t.id != task.id:
                out.append(t)
        self._set_tasks(out)
        logger.info("Task %s updated (completed=%s)", task.id, task.completed)
