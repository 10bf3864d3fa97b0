# src/taskmaster/connectors/console_view.py

"""Plain-text rendering of the single task page. Pure functions, no I/O."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..core.reducer import ServerStatus, ViewState
from ..tasks.task_filter import ALL, TaskFilter, TaskStats, filter_tasks, task_stats
from ..tasks.task_models import Task, TaskStatus

STATUS_LABELS: dict[ServerStatus, str] = {
    ServerStatus.ONLINE: "Server Online",
    ServerStatus.OFFLINE: "Server Offline",
    ServerStatus.CHECKING: "Checking Server...",
}

STATUS_MARKERS: dict[TaskStatus, str] = {
    TaskStatus.COMPLETED: "[x]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.PENDING: "[ ]",
}

EMPTY_MESSAGE = "No tasks found. Add a new task to get started!"
RULE = "-" * 60


def format_due_date(value: date | None) -> str:
    """en-US short form, e.g. "Mar 5, 2024"."""
    if value is None:
        return "No due date"
    return f"{value:%b} {value.day}, {value.year}"


def short_id(task_id: str, width: int = 6) -> str:
    return task_id[-width:] if len(task_id) > width else task_id


def format_task_line(index: int, task: Task) -> str:
    marker = STATUS_MARKERS.get(task.status, "[ ]")
    parts = [f"{index:>3}. {marker} {task.title}", f"({task.priority.value.capitalize()})"]
    if task.due_date is not None:
        parts.append(f"due {format_due_date(task.due_date)}")
    parts.append(f"#{short_id(task.id)}")
    return "  ".join(parts)


def format_task_details(task: Task) -> str:
    lines = [
        f"Title:       {task.title}",
        f"Status:      {task.status.value}",
        f"Priority:    {task.priority.value.capitalize()}",
        f"Due:         {format_due_date(task.due_date)}",
        f"Id:          {task.id}",
    ]
    if task.description:
        lines.append("Description:")
        lines.extend(f"  {line}" for line in task.description.splitlines())
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    return (
        f"Total: {stats.total}  Completed: {stats.completed}  "
        f"In Progress: {stats.in_progress}  Pending: {stats.pending}"
    )


def format_filters(filters: TaskFilter) -> str:
    status = "All Statuses" if filters.status == ALL else filters.status
    priority = "All Priorities" if filters.priority == ALL else filters.priority
    return f"Filter: status={status}  priority={priority}"


def render_task_list(tasks: Sequence[Task], expanded: set[str] | None = None) -> list[str]:
    expanded = expanded or set()
    lines: list[str] = []
    for i, task in enumerate(tasks, start=1):
        lines.append(format_task_line(i, task))
        if task.id in expanded and task.description:
            lines.extend(f"        {line}" for line in task.description.splitlines())
    return lines


def render_page(
    view: ViewState,
    *,
    app_name: str = "TaskMaster Pro",
    expanded: set[str] | None = None,
    editing: str | None = None,
) -> tuple[str, list[Task]]:
    """
    Render the whole page. Returns (text, visible tasks) so the caller can
    resolve row numbers against exactly what was shown.
    """
    visible = filter_tasks(view.tasks, view.filters)
    lines = [f"{app_name}  [{STATUS_LABELS[view.server_status]}]", RULE]

    if view.error:
        lines.append(f"! {view.error}")
        if view.server_status == ServerStatus.OFFLINE:
            lines.append("  Use /retry to reconnect.")
        lines.append(RULE)

    lines.append(format_stats(task_stats(view.tasks)))
    lines.append(format_filters(view.filters))
    lines.append(RULE)

    if view.server_status == ServerStatus.OFFLINE:
        lines.extend(
            [
                "Server Connection Error",
                "Cannot connect to the backend server. Start the server, then use /retry.",
            ]
        )
    elif view.is_loading:
        lines.append("Loading...")
    elif not visible:
        lines.append(EMPTY_MESSAGE)
    else:
        lines.extend(render_task_list(visible, expanded))

    if editing is not None:
        lines.append(RULE)
        lines.append(f"Editing #{short_id(editing)}: /set <field> <value>, /save or /cancel")

    return "\n".join(lines), visible
