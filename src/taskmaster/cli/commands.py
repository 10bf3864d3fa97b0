# src/taskmaster/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Awaitable, Callable

from ..connectors.console_view import format_stats, format_task_details, short_id
from ..core.reducer import ServerStatus
from ..core.state import AppState
from ..tasks.drafts import EditSession, TaskDraft
from ..tasks.errors import ErrorKind, TaskApiError, ValidationError
from ..tasks.task_filter import TaskFilter, parse_priority, parse_status
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Bad command usage; the message is shown to the user as-is."""


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

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

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args, emit)
        except CommandError as e:
            return str(e)
        except TaskApiError as e:
            logger.debug("Command /%s failed kind=%s", name, e.kind.value)
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def friendly_error_message(err: TaskApiError) -> str:
    if err.kind == ErrorKind.VALIDATION:
        return f"Invalid input: {err}"
    if err.kind == ErrorKind.CONNECTIVITY:
        return f"{err} Use /retry once the server is up."
    return str(err)


# ---- helpers ----


def resolve_task(state: AppState, ref: str) -> Task:
    """
    Resolve a task reference: a row number from the last rendered view,
    a full id, or a unique id prefix/suffix (as shown after '#').
    """
    ref = ref.strip().lstrip("#")
    if not ref:
        raise CommandError("Missing task reference (row number or id).")

    if ref.isdigit() and len(ref) <= 4:
        idx = int(ref)
        if not 1 <= idx <= len(state.last_view):
            raise CommandError(f"No row {idx} in the current view.")
        return state.last_view[idx - 1]

    view = state.store.state
    exact = view.find(ref)
    if exact is not None:
        return exact

    matches = [t for t in view.tasks if t.id.startswith(ref) or t.id.endswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise CommandError(f"No task matches {ref!r}.")
    raise CommandError(f"{ref!r} is ambiguous ({len(matches)} tasks match).")


def _require_args(args: list[str], n: int, usage: str) -> None:
    if len(args) < n:
        raise CommandError(f"Usage: {usage}")


def _require_mutable(state: AppState) -> None:
    view = state.store.state
    if view.server_status != ServerStatus.ONLINE:
        raise CommandError("Server is offline; changes are disabled. Use /retry to reconnect.")
    if not view.can_mutate:
        raise CommandError("Another request is still running. Try again in a moment.")


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return ""


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_mutable(state)
    tasks = await state.store.load()
    return f"Loaded {len(tasks)} tasks."


async def cmd_retry(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Checking server...")
    status = await state.store.check_connection()
    if status == ServerStatus.ONLINE:
        return "Server is online."
    return "Server is still offline."


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title words> [description=..] [status=..] [priority=..] [due=YYYY-MM-DD]
    """
    _require_args(args, 1, "/add <title> [description=..] [status=..] [priority=..] [due=YYYY-MM-DD]")
    _require_mutable(state)
    draft = TaskDraft.from_args(args)
    task = await state.store.create(draft)
    return f"Added '{task.title}' (#{short_id(task.id)})."


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 1, "/done <ref>")
    _require_mutable(state)
    task = resolve_task(state, args[0])
    updated = await state.store.toggle_completed(task.id)
    return f"'{updated.title}' is now {updated.status.value}."


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 2, "/status <ref> <pending|in-progress|completed>")
    _require_mutable(state)
    task = resolve_task(state, args[0])
    try:
        status = parse_status(args[1])
    except ValueError as e:
        raise ValidationError(str(e)) from e
    updated = await state.store.update(task.id, {"status": status})
    return f"'{updated.title}' is now {updated.status.value}."


async def cmd_priority(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 2, "/priority <ref> <low|medium|high>")
    _require_mutable(state)
    task = resolve_task(state, args[0])
    try:
        priority = parse_priority(args[1])
    except ValueError as e:
        raise ValidationError(str(e)) from e
    updated = await state.store.update(task.id, {"priority": priority})
    return f"'{updated.title}' priority is now {updated.priority.value}."


async def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    Toggle the expanded description under a row and print the full record.

    While online the record is re-fetched, so the details reflect the server;
    offline the local copy is shown.
    """
    _require_args(args, 1, "/show <ref>")
    task = resolve_task(state, args[0])
    if state.store.state.can_mutate:
        task = await state.store.get(task.id)
    if task.id in state.expanded:
        state.expanded.discard(task.id)
    else:
        state.expanded.add(task.id)
    return format_task_details(task)


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 1, "/edit <ref>")
    _require_mutable(state)
    task = resolve_task(state, args[0])
    state.editing = EditSession(task)
    return f"Editing '{task.title}'.\n{format_task_details(task)}"


async def cmd_set(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 1, "/set <field> <value>")
    session = state.editing
    if session is None:
        raise CommandError("Nothing is being edited. Use /edit <ref> first.")
    field_name, *rest = args
    session.set_field(field_name, " ".join(rest))
    return format_task_details_from_draft(session)


def format_task_details_from_draft(session: EditSession) -> str:
    d = session.draft
    preview = Task(
        id=session.task_id,
        title=d.title,
        description=d.description,
        status=d.status,
        priority=d.priority,
        due_date=d.due_date,
    )
    marker = " (unsaved)" if session.dirty else ""
    return f"Draft{marker}:\n{format_task_details(preview)}"


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    session = state.editing
    if session is None:
        raise CommandError("Nothing is being edited.")
    _require_mutable(state)
    changes = session.to_update()
    updated = await state.store.update(session.task_id, changes)
    state.editing = None
    return f"Saved '{updated.title}'."


async def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.editing is None:
        return "Nothing to cancel."
    state.editing = None
    return "Edit discarded."


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _require_args(args, 1, "/delete <ref>")
    _require_mutable(state)
    task = resolve_task(state, args[0])
    await state.store.remove(task.id)
    state.expanded.discard(task.id)
    if state.editing is not None and state.editing.task_id == task.id:
        state.editing = None
    return f"Deleted '{task.title}'."


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /filter                         -> show current filters
    /filter status=completed        -> filter by status (keeps priority)
    /filter priority=high status=all
    /filter reset                   -> show everything
    """
    current = state.store.state.filters
    if not args:
        return f"Filters: status={current.status} priority={current.priority}"
    try:
        filters = TaskFilter.parse(args, base=current)
    except ValueError as e:
        raise CommandError(str(e)) from e
    state.store.set_filters(filters)
    return f"Filters: status={filters.status} priority={filters.priority}"


async def cmd_stats(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return format_stats(state.store.stats())


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Redraw the task list.", aliases=["ls"])
registry.register("reload", cmd_reload, help_text="Reload all tasks from the server.")
registry.register("retry", cmd_retry, help_text="Re-check the server connection and reload.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [description=..] [status=..] [priority=..] [due=YYYY-MM-DD].",
    aliases=["new"],
)
registry.register("done", cmd_done, help_text="Toggle completed/pending: /done <ref>.")
registry.register("status", cmd_status, help_text="Set status: /status <ref> <pending|in-progress|completed>.")
registry.register("priority", cmd_priority, help_text="Set priority: /priority <ref> <low|medium|high>.")
registry.register("show", cmd_show, help_text="Show/hide a task's details: /show <ref>.")
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <ref>.")
registry.register("set", cmd_set, help_text="Change a field of the task being edited: /set <field> <value>.")
registry.register("save", cmd_save, help_text="Save the task being edited.")
registry.register("cancel", cmd_cancel, help_text="Discard the current edit.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <ref>.", aliases=["rm", "del"])
registry.register(
    "filter", cmd_filter, help_text="Filter the list: /filter [status=..] [priority=..] | /filter reset."
)
registry.register("stats", cmd_stats, help_text="Show task counts.")
