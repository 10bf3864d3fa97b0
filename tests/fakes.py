# tests/fakes.py

from __future__ import annotations

from dataclasses import replace
from typing import Any

from taskmaster.tasks.errors import UnknownError
from taskmaster.tasks.task_models import Task


class FakeTaskApi:
    """
    In-memory backend implementing the TaskApi port.

    - Assigns ids "t1", "t2", ... like a real server would
    - Applies server-side defaults (pending / medium)
    - Captures calls for assertions
    - `healthy=False` makes the health check fail
    - `fail_next` raises the given exception on the next non-health call
    """

    def __init__(self, tasks: list[Task] | None = None, *, healthy: bool = True) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.healthy = healthy
        self.fail_next: Exception | None = None
        self.calls: list[tuple[str, Any]] = []
        self._next_id = len(self.tasks) + 1

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            err, self.fail_next = self.fail_next, None
            raise err

    def _index(self, task_id: str) -> int:
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                return i
        raise UnknownError("Request failed with status code 404", status_code=404)

    @property
    def data_calls(self) -> list[tuple[str, Any]]:
        return [c for c in self.calls if c[0] != "check_health"]

    async def check_health(self) -> bool:
        self.calls.append(("check_health", None))
        return self.healthy

    async def list_tasks(self) -> list[Task]:
        self.calls.append(("list_tasks", None))
        self._maybe_fail()
        return list(self.tasks)

    async def get_task(self, task_id: str) -> Task:
        self.calls.append(("get_task", task_id))
        self._maybe_fail()
        return self.tasks[self._index(task_id)]

    async def create_task(self, payload: dict[str, Any]) -> Task:
        self.calls.append(("create_task", payload))
        self._maybe_fail()
        task = Task.from_wire({"_id": f"t{self._next_id}", **payload})
        self._next_id += 1
        # Server inserts at the end; the client shows new ones first.
        self.tasks.append(task)
        return task

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> Task:
        self.calls.append(("update_task", (task_id, payload)))
        self._maybe_fail()
        i = self._index(task_id)
        merged = {**self.tasks[i].to_wire(), **payload, "_id": task_id}
        self.tasks[i] = Task.from_wire(merged)
        return self.tasks[i]

    async def delete_task(self, task_id: str) -> None:
        self.calls.append(("delete_task", task_id))
        self._maybe_fail()
        del self.tasks[self._index(task_id)]


def make_task(task_id: str, title: str | None = None, **fields: Any) -> Task:
    return replace(Task(id=task_id, title=title or f"Task {task_id}"), **fields)
