# src/taskmaster/tasks/task_filter.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .task_models import Task, TaskPriority, TaskStatus

ALL = "all"

_STATUS_ALIASES = {
    "in_progress": TaskStatus.IN_PROGRESS,
    "inprogress": TaskStatus.IN_PROGRESS,
    "ip": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.COMPLETED,
    "todo": TaskStatus.PENDING,
}


def parse_status(raw: str) -> TaskStatus:
    s = raw.strip().lower()
    if s in _STATUS_ALIASES:
        return _STATUS_ALIASES[s]
    try:
        return TaskStatus(s)
    except ValueError:
        allowed = ", ".join(v.value for v in TaskStatus)
        raise ValueError(f"Unknown status: {raw!r} (expected one of: {allowed})") from None


def parse_priority(raw: str) -> TaskPriority:
    s = raw.strip().lower()
    try:
        return TaskPriority(s)
    except ValueError:
        allowed = ", ".join(v.value for v in TaskPriority)
        raise ValueError(f"Unknown priority: {raw!r} (expected one of: {allowed})") from None


def parse_filter_value(field_name: str, raw: str) -> str:
    """Parse a status/priority filter value; "all" (or "*") is the wildcard."""
    if field_name not in ("status", "priority"):
        raise ValueError(f"Unknown filter: {field_name!r} (expected status or priority)")
    s = raw.strip().lower()
    if s in (ALL, "*", ""):
        return ALL
    if field_name == "status":
        return parse_status(s).value
    return parse_priority(s).value


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """Each field is a concrete enum value or the wildcard "all"."""

    status: str = ALL
    priority: str = ALL

    @property
    def is_wildcard(self) -> bool:
        return self.status == ALL and self.priority == ALL

    def matches(self, task: Task) -> bool:
        status_match = self.status == ALL or task.status == self.status
        priority_match = self.priority == ALL or task.priority == self.priority
        return status_match and priority_match

    @classmethod
    def parse(cls, args: Iterable[str], base: TaskFilter | None = None) -> TaskFilter:
        """
        Build a filter from "key=value" tokens, starting from `base`.

        "reset" clears both fields.
        """
        status = base.status if base else ALL
        priority = base.priority if base else ALL
        for token in args:
            if token.lower() == "reset":
                status, priority = ALL, ALL
                continue
            key, sep, value = token.partition("=")
            if not sep:
                raise ValueError(f"Expected key=value, got {token!r}")
            key = key.strip().lower()
            value = parse_filter_value(key, value)
            if key == "status":
                status = value
            else:
                priority = value
        return cls(status=status, priority=priority)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    in_progress: int


def filter_tasks(tasks: Sequence[Task], filters: TaskFilter) -> list[Task]:
    """Order-preserving subset of `tasks` matching both criteria."""
    return [task for task in tasks if filters.matches(task)]


def task_stats(tasks: Sequence[Task]) -> TaskStats:
    """Aggregate counts over the unfiltered list."""
    completed = pending = in_progress = 0
    for task in tasks:
        if task.status == TaskStatus.COMPLETED:
            completed += 1
        elif task.status == TaskStatus.PENDING:
            pending += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1
    return TaskStats(total=len(tasks), completed=completed, pending=pending, in_progress=in_progress)
