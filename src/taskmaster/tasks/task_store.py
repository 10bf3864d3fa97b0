# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from ..core.connectivity import ConnectivityProber
from ..core.ports import TaskApi
from ..core.reducer import (
    Event,
    FiltersChanged,
    ProbeFailed,
    ProbeStarted,
    ProbeSucceeded,
    RequestFailed,
    RequestFinished,
    RequestStarted,
    ServerStatus,
    TaskCreated,
    TaskRemoved,
    TasksLoaded,
    TaskUpdated,
    ViewState,
    reduce,
)
from .drafts import TaskDraft, validate_title
from .errors import (
    CONNECTIVITY_MESSAGE,
    PROBE_FAILED_MESSAGE,
    SERVER_UNAVAILABLE_MESSAGE,
    ConnectivityError,
    ErrorKind,
    TaskApiError,
    ValidationError,
)
from .task_filter import TaskFilter, TaskStats, filter_tasks, task_stats
from .task_models import Task, TaskStatus, task_fields_to_wire

logger = logging.getLogger(__name__)

T = TypeVar("T")

StateListener = Callable[[ViewState], None]

_FALLBACK_MESSAGES = {
    "load": "Failed to load tasks. Please try again later.",
    "fetch": "Failed to fetch task. Please try again.",
    "create": "Failed to add task. Please try again.",
    "update": "Failed to update task. Please try again.",
    "delete": "Failed to delete task. Please try again.",
}


class TaskStore:
    """
    Client-side mirror of the server's task list.

    The list only ever holds server-confirmed records:
    - load() replaces everything with the server list,
    - create() prepends the record the server returned,
    - update() swaps in the full record the server returned,
    - remove() drops the record after the server confirmed the delete.

    Every operation is gated on connectivity: while the server is not ONLINE
    the call is refused with ConnectivityError and no request is made.
    Failures are recorded in view state (the error banner) and re-raised.
    """

    def __init__(self, api: TaskApi, prober: ConnectivityProber | None = None) -> None:
        self._api = api
        self._prober = prober or ConnectivityProber(api)
        self._state = ViewState()
        self._listeners: list[StateListener] = []

    # ---- state ----

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._state.tasks

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self._state.tasks, self._state.filters)

    def stats(self) -> TaskStats:
        return task_stats(self._state.tasks)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event) -> ViewState:
        self._state = reduce(self._state, event)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener failed event=%s", type(event).__name__)
        return self._state

    def set_filters(self, filters: TaskFilter) -> None:
        self.dispatch(FiltersChanged(filters))

    # ---- connectivity ----

    async def check_connection(self) -> ServerStatus:
        """
        Mount / manual-retry flow: probe, and on ONLINE reload the list.

        Load failures are already reflected in view state, so they are not re-raised here.
        """
        self.dispatch(ProbeStarted())
        try:
            status = await self._prober.probe()
        except Exception:
            logger.exception("Probe crashed")
            self.dispatch(ProbeFailed(PROBE_FAILED_MESSAGE))
            return ServerStatus.OFFLINE

        if status != ServerStatus.ONLINE:
            self.dispatch(ProbeFailed(CONNECTIVITY_MESSAGE))
            return status

        self.dispatch(ProbeSucceeded())
        try:
            await self.load()
        except TaskApiError as e:
            logger.info("Initial load failed after successful probe: %s", e.kind.value)
        return status

    def _require_online(self) -> None:
        if self._state.server_status != ServerStatus.ONLINE:
            raise ConnectivityError()

    async def _run(self, name: str, call: Callable[[], Awaitable[T]], on_success: Callable[[T], Event]) -> T:
        self.dispatch(RequestStarted())
        try:
            result = await call()
        except TaskApiError as e:
            logger.info("%s failed: %s: %s", name, e.kind.value, e)
            self.dispatch(RequestFailed(e.kind, str(e)))
            raise
        except Exception as e:
            # Keep the page consistent (loading flag off, banner shown) before propagating.
            logger.exception("%s crashed", name)
            self.dispatch(RequestFailed(ErrorKind.UNKNOWN, str(e) or _FALLBACK_MESSAGES[name]))
            raise
        self.dispatch(on_success(result))
        return result

    # ---- CRUD ----

    async def load(self) -> list[Task]:
        self._require_online()

        async def call() -> list[Task]:
            if not await self._api.check_health():
                raise ConnectivityError(SERVER_UNAVAILABLE_MESSAGE)
            return await self._api.list_tasks()

        tasks = await self._run("load", call, lambda loaded: TasksLoaded(tuple(loaded)))
        logger.info("Loaded %d tasks", len(tasks))
        return tasks

    async def get(self, task_id: str) -> Task:
        """Fetch one record from the server; the local list is not modified."""
        self._require_online()
        return await self._run("fetch", lambda: self._api.get_task(task_id), lambda _t: RequestFinished())

    async def create(self, draft: TaskDraft) -> Task:
        self._require_online()
        payload = draft.to_payload()

        task = await self._run("create", lambda: self._api.create_task(payload), TaskCreated)
        logger.info("Created task id=%s", task.id)
        return task

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        """
        Send a partial field set (python field names: title, description,
        status, priority, due_date) and adopt the full record the server returns.
        """
        self._require_online()
        if "title" in changes:
            validate_title(changes["title"])
        try:
            payload = task_fields_to_wire(dict(changes))
        except KeyError as e:
            raise ValidationError(str(e.args[0])) from e

        task = await self._run("update", lambda: self._api.update_task(task_id, payload), TaskUpdated)
        logger.info("Updated task id=%s fields=%s", task_id, sorted(payload))
        return task

    async def toggle_completed(self, task_id: str) -> Task:
        current = self._state.find(task_id)
        if current is not None and current.status == TaskStatus.COMPLETED:
            new_status = TaskStatus.PENDING
        else:
            new_status = TaskStatus.COMPLETED
        return await self.update(task_id, {"status": new_status})

    async def remove(self, task_id: str) -> None:
        self._require_online()
        await self._run("delete", lambda: self._api.delete_task(task_id), lambda _r: TaskRemoved(task_id))
        logger.info("Deleted task id=%s", task_id)
