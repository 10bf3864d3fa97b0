# src/taskmaster/tasks/drafts.py

"""
Local, unconfirmed edits.

A draft never touches the canonical list. `TaskDraft` backs the new-task form;
`EditSession` scopes a draft to one record: cancel discards it, save submits
the whole draft as the update body and the store adopts whatever the server
returns.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from .errors import TITLE_REQUIRED_MESSAGE, ValidationError
from .task_filter import parse_priority, parse_status
from .task_models import Task, TaskPriority, TaskStatus, task_fields_to_wire

FIELD_ALIASES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "desc": "description",
    "status": "status",
    "priority": "priority",
    "prio": "priority",
    "due": "due_date",
    "duedate": "due_date",
    "due_date": "due_date",
}


def resolve_field(name: str) -> str:
    key = name.strip().lower().replace("-", "_")
    try:
        return FIELD_ALIASES[key]
    except KeyError:
        raise ValidationError(
            f"Unknown field: {name!r} (expected title, description, status, priority or due)"
        ) from None


def parse_field_value(field_name: str, raw: str) -> Any:
    """Parse user text for one task field into its typed value."""
    text = raw.strip()
    try:
        if field_name == "title":
            return text
        if field_name == "description":
            return text or None
        if field_name == "status":
            return parse_status(text)
        if field_name == "priority":
            return parse_priority(text)
        if field_name == "due_date":
            if text.lower() in ("", "none", "-"):
                return None
            return date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    raise ValidationError(f"Unknown field: {field_name!r}")


def validate_title(title: Any) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(TITLE_REQUIRED_MESSAGE)


@dataclass(slots=True)
class TaskDraft:
    title: str = ""
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        return cls(
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
        )

    @classmethod
    def from_args(cls, args: Iterable[str]) -> TaskDraft:
        """
        Build a draft from command tokens: bare words form the title,
        `key=value` tokens set other fields (e.g. priority=high due=2024-05-01).
        """
        draft = cls()
        words: list[str] = []
        for token in args:
            key, sep, value = token.partition("=")
            if sep and key.strip().lower().replace("-", "_") in FIELD_ALIASES:
                draft.set_field(key, value)
            else:
                words.append(token)
        if words:
            draft.title = " ".join(words)
        return draft

    def set_field(self, name: str, raw: str) -> None:
        field_name = resolve_field(name)
        setattr(self, field_name, parse_field_value(field_name, raw))

    def validate(self) -> None:
        validate_title(self.title)

    def fields(self) -> dict[str, Any]:
        return asdict(self)

    def to_payload(self) -> dict[str, Any]:
        """POST body: {title, description?, status, priority, dueDate?}."""
        self.validate()
        values = self.fields()
        values["title"] = self.title.strip()
        if values["description"] is None:
            del values["description"]
        if values["due_date"] is None:
            del values["due_date"]
        return task_fields_to_wire(values)


@dataclass(slots=True)
class EditSession:
    """Inline edit buffer for one record."""

    original: Task
    draft: TaskDraft = field(init=False)

    def __post_init__(self) -> None:
        self.draft = TaskDraft.from_task(self.original)

    @property
    def task_id(self) -> str:
        return self.original.id

    @property
    def dirty(self) -> bool:
        return self.draft != TaskDraft.from_task(self.original)

    def set_field(self, name: str, raw: str) -> None:
        self.draft.set_field(name, raw)

    def to_update(self) -> dict[str, Any]:
        """Full field set for the update call (submitted wholesale, never merged locally)."""
        self.draft.validate()
        values = self.draft.fields()
        values["title"] = self.draft.title.strip()
        return values
