# src/taskmaster/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_wire(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(str(raw))
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_wire(cls, raw: Any) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


def parse_due_date(raw: Any) -> date | None:
    """
    Accept "YYYY-MM-DD" or a full ISO timestamp ("2024-03-05T00:00:00.000Z").
    Only the calendar day is kept; anything unparseable becomes None.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


class InvalidTaskRecord(ValueError):
    """Server payload is not a complete task record."""


@dataclass(frozen=True, slots=True)
class Task:
    """A server-confirmed task. Instances are immutable; the store swaps whole records."""

    id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @classmethod
    def from_wire(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise InvalidTaskRecord(f"Expected a JSON object, got {type(data).__name__}")

        raw_id = data.get("_id")
        if raw_id is None or raw_id == "":
            raw_id = data.get("id")
        if raw_id is None or str(raw_id).strip() == "":
            raise InvalidTaskRecord("Task record has no id")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise InvalidTaskRecord(f"Task record {raw_id} has no title")

        description = data.get("description")
        if description is not None:
            description = str(description) or None

        return cls(
            id=str(raw_id),
            title=title,
            description=description,
            status=TaskStatus.from_wire(data.get("status")),
            priority=TaskPriority.from_wire(data.get("priority")),
            due_date=parse_due_date(data.get("dueDate")),
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            **task_fields_to_wire(
                {
                    "title": self.title,
                    "description": self.description,
                    "status": self.status,
                    "priority": self.priority,
                    "due_date": self.due_date,
                }
            ),
        }


# Python field name -> wire field name
WIRE_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "due_date": "dueDate",
}


def task_fields_to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    """Encode a (partial) set of task fields into the JSON body the backend expects."""
    out: dict[str, Any] = {}
    for name, value in fields.items():
        wire_name = WIRE_FIELDS.get(name)
        if wire_name is None:
            raise KeyError(f"Unknown task field: {name}")
        if isinstance(value, StrEnum):
            value = value.value
        elif isinstance(value, date):
            value = value.isoformat()
        out[wire_name] = value
    return out
