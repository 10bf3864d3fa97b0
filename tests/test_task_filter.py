# tests/test_task_filter.py

from __future__ import annotations

import itertools

import pytest

from taskmaster.tasks.task_filter import (
    ALL,
    TaskFilter,
    TaskStats,
    filter_tasks,
    parse_filter_value,
    task_stats,
)
from taskmaster.tasks.task_models import TaskPriority, TaskStatus

from .fakes import make_task

TASKS = [
    make_task("1", status=TaskStatus.PENDING, priority=TaskPriority.HIGH),
    make_task("2", status=TaskStatus.COMPLETED, priority=TaskPriority.LOW),
    make_task("3", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH),
    make_task("4", status=TaskStatus.PENDING, priority=TaskPriority.MEDIUM),
    make_task("5", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH),
]


@pytest.mark.parametrize(
    "status,priority",
    list(itertools.product([ALL, *TaskStatus], [ALL, *TaskPriority])),
)
def test_filtered_view_is_ordered_subset_matching_both(status: str, priority: str) -> None:
    f = TaskFilter(status=str(status), priority=str(priority))
    out = filter_tasks(TASKS, f)

    positions = [TASKS.index(t) for t in out]
    assert positions == sorted(positions)
    for t in out:
        assert status == ALL or t.status == status
        assert priority == ALL or t.priority == priority
    # Nothing that matches is dropped.
    assert len(out) == sum(1 for t in TASKS if f.matches(t))


def test_completed_only_scenario() -> None:
    tasks = [
        make_task("p", status=TaskStatus.PENDING),
        make_task("c", status=TaskStatus.COMPLETED),
        make_task("i", status=TaskStatus.IN_PROGRESS),
    ]
    out = filter_tasks(tasks, TaskFilter(status="completed", priority=ALL))
    assert [t.id for t in out] == ["c"]


def test_stats_count_unfiltered_list() -> None:
    assert task_stats(TASKS) == TaskStats(total=5, completed=2, pending=2, in_progress=1)
    assert task_stats([]) == TaskStats(total=0, completed=0, pending=0, in_progress=0)


def test_parse_keeps_base_and_reset_clears() -> None:
    f = TaskFilter.parse(["status=in_progress"])
    assert f == TaskFilter(status="in-progress", priority=ALL)

    f = TaskFilter.parse(["priority=HIGH"], base=f)
    assert f == TaskFilter(status="in-progress", priority="high")

    assert TaskFilter.parse(["reset"], base=f).is_wildcard


@pytest.mark.parametrize("bad", [["status=later"], ["color=red"], ["color=all"], ["status"]])
def test_parse_rejects_bad_tokens(bad: list[str]) -> None:
    with pytest.raises(ValueError):
        TaskFilter.parse(bad)


def test_parse_filter_value_wildcards() -> None:
    assert parse_filter_value("status", "All") == ALL
    assert parse_filter_value("priority", "*") == ALL


def test_parse_filter_value_checks_field_before_wildcard() -> None:
    with pytest.raises(ValueError, match="Unknown filter"):
        parse_filter_value("color", "all")
