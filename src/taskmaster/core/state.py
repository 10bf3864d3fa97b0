# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.drafts import EditSession
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in commands and the renderer.
    settings: Any

    store: TaskStore
    api: Any = None  # concrete client, kept for shutdown (aclose)

    # Console-only UI state; the canonical list lives in store.state.
    editing: EditSession | None = None
    last_view: list[Task] = field(default_factory=list)
    expanded: set[str] = field(default_factory=set)
