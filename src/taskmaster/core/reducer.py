# src/taskmaster/core/reducer.py

"""
View state as an explicit state machine.

`ViewState` is an immutable snapshot of everything the page renders:
the task list, the coarse loading flag, the error banner, the server
status and the active filters. `reduce(state, event)` is pure: it never
mutates its input and never performs I/O.

Server status transitions:
    checking -> online | offline
    offline  -> checking (manual retry) -> online | offline
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum

from ..tasks.errors import ErrorKind
from ..tasks.task_filter import TaskFilter
from ..tasks.task_models import Task


class ServerStatus(StrEnum):
    CHECKING = "checking"
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class ViewState:
    tasks: tuple[Task, ...] = ()
    is_loading: bool = True
    error: str | None = None
    error_kind: ErrorKind | None = None
    server_status: ServerStatus = ServerStatus.CHECKING
    filters: TaskFilter = field(default_factory=TaskFilter)

    @property
    def can_mutate(self) -> bool:
        """Mutating actions are enabled only while online and idle."""
        return self.server_status == ServerStatus.ONLINE and not self.is_loading

    def find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


# ---- events ----


@dataclass(frozen=True, slots=True)
class ProbeStarted:
    pass


@dataclass(frozen=True, slots=True)
class ProbeSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class ProbeFailed:
    message: str


@dataclass(frozen=True, slots=True)
class RequestStarted:
    pass


@dataclass(frozen=True, slots=True)
class RequestFailed:
    kind: ErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class RequestFinished:
    """A request that succeeded without touching the list (e.g. a single-record fetch)."""


@dataclass(frozen=True, slots=True)
class TasksLoaded:
    tasks: tuple[Task, ...]


@dataclass(frozen=True, slots=True)
class TaskCreated:
    task: Task


@dataclass(frozen=True, slots=True)
class TaskUpdated:
    task: Task


@dataclass(frozen=True, slots=True)
class TaskRemoved:
    task_id: str


@dataclass(frozen=True, slots=True)
class FiltersChanged:
    filters: TaskFilter


Event = (
    ProbeStarted
    | ProbeSucceeded
    | ProbeFailed
    | RequestStarted
    | RequestFailed
    | RequestFinished
    | TasksLoaded
    | TaskCreated
    | TaskUpdated
    | TaskRemoved
    | FiltersChanged
)


def _unique_by_id(tasks: tuple[Task, ...]) -> tuple[Task, ...]:
    # First occurrence wins; server order is kept.
    seen: set[str] = set()
    out: list[Task] = []
    for task in tasks:
        if task.id in seen:
            continue
        seen.add(task.id)
        out.append(task)
    return tuple(out)


def _succeeded(state: ViewState, **changes) -> ViewState:
    return replace(state, is_loading=False, error=None, error_kind=None, **changes)


def reduce(state: ViewState, event: Event) -> ViewState:
    match event:
        case ProbeStarted():
            return replace(state, server_status=ServerStatus.CHECKING, error=None, error_kind=None)

        case ProbeSucceeded():
            return replace(state, server_status=ServerStatus.ONLINE)

        case ProbeFailed(message=message):
            return replace(
                state,
                server_status=ServerStatus.OFFLINE,
                is_loading=False,
                error=message,
                error_kind=ErrorKind.CONNECTIVITY,
            )

        case RequestStarted():
            return replace(state, is_loading=True)

        case RequestFailed(kind=kind, message=message):
            return replace(state, is_loading=False, error=message, error_kind=kind)

        case RequestFinished():
            return _succeeded(state)

        case TasksLoaded(tasks=tasks):
            return _succeeded(state, tasks=_unique_by_id(tuple(tasks)))

        case TaskCreated(task=task):
            rest = tuple(t for t in state.tasks if t.id != task.id)
            return _succeeded(state, tasks=(task, *rest))

        case TaskUpdated(task=task):
            return _succeeded(
                state, tasks=tuple(task if t.id == task.id else t for t in state.tasks)
            )

        case TaskRemoved(task_id=task_id):
            return _succeeded(state, tasks=tuple(t for t in state.tasks if t.id != task_id))

        case FiltersChanged(filters=filters):
            return replace(state, filters=filters)

    raise TypeError(f"Unknown event: {event!r}")
