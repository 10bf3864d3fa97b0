# src/taskmaster/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and the prober depend on Protocols instead of the concrete HTTP
client. Tests inject an in-memory backend through the same seam.
"""

from typing import Any, Protocol

from ..tasks.task_models import Task

TaskPayload = dict[str, Any]
# Wire-shaped JSON body: {"title": ..., "dueDate": "YYYY-MM-DD", ...}


class TaskApi(Protocol):
    """Backend CRUD surface. Failures are raised as TaskApiError subclasses."""

    async def check_health(self) -> bool: ...
    async def list_tasks(self) -> list[Task]: ...
    async def get_task(self, task_id: str) -> Task: ...
    async def create_task(self, payload: TaskPayload) -> Task: ...
    async def update_task(self, task_id: str, payload: TaskPayload) -> Task: ...
    async def delete_task(self, task_id: str) -> None: ...
