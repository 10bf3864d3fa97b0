# tests/test_console_view.py

from __future__ import annotations

from datetime import date

from taskmaster.connectors.console_view import (
    EMPTY_MESSAGE,
    format_due_date,
    format_task_line,
    render_page,
)
from taskmaster.core.reducer import ServerStatus, ViewState
from taskmaster.tasks.task_filter import TaskFilter
from taskmaster.tasks.task_models import TaskPriority, TaskStatus

from .fakes import make_task


def test_format_due_date() -> None:
    assert format_due_date(date(2024, 3, 5)) == "Mar 5, 2024"
    assert format_due_date(None) == "No due date"


def test_task_line_shows_marker_priority_and_due() -> None:
    line = format_task_line(
        2,
        make_task("abcdef123456", "Ship it", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH, due_date=date(2024, 1, 9)),
    )
    assert "2. [x] Ship it" in line
    assert "(High)" in line
    assert "due Jan 9, 2024" in line
    assert line.endswith("#123456")


def test_offline_page_shows_banner_and_retry_hint() -> None:
    view = ViewState(server_status=ServerStatus.OFFLINE, is_loading=False, error="Cannot connect.")
    text, visible = render_page(view)
    assert "Server Offline" in text
    assert "! Cannot connect." in text
    assert "/retry" in text
    assert visible == []


def test_empty_and_loading_states() -> None:
    text, _ = render_page(ViewState(server_status=ServerStatus.ONLINE, is_loading=False))
    assert EMPTY_MESSAGE in text

    text, _ = render_page(ViewState(server_status=ServerStatus.CHECKING))
    assert "Checking Server..." in text
    assert "Loading..." in text


def test_page_lists_only_filtered_rows_but_counts_everything() -> None:
    view = ViewState(
        tasks=(
            make_task("a", "Alpha", status=TaskStatus.PENDING),
            make_task("b", "Beta", status=TaskStatus.COMPLETED),
        ),
        is_loading=False,
        server_status=ServerStatus.ONLINE,
        filters=TaskFilter(status="completed"),
    )
    text, visible = render_page(view, app_name="Tasks")

    assert [t.id for t in visible] == ["b"]
    assert "Beta" in text and "Alpha" not in text
    assert "Total: 2" in text
    assert "status=completed" in text


def test_expanded_row_shows_description() -> None:
    view = ViewState(
        tasks=(make_task("a", "Alpha", description="line one\nline two"),),
        is_loading=False,
        server_status=ServerStatus.ONLINE,
    )
    collapsed, _ = render_page(view)
    expanded, _ = render_page(view, expanded={"a"})
    assert "line two" not in collapsed
    assert "line two" in expanded
