# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.cli.bootstrap import create_initial_state
from taskmaster.core.state import AppState
from taskmaster.tasks.task_store import TaskStore

from .fakes import FakeTaskApi


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env.
    """
    return SimpleNamespace(
        app_name="TaskMaster Test",
        log_level="DEBUG",
        api_base_url="http://testserver/api",
        request_timeout_seconds=1.0,
        data_dir=tmp_path,
    )


@pytest.fixture()
def api() -> FakeTaskApi:
    return FakeTaskApi()


@pytest.fixture()
def store(api: FakeTaskApi) -> TaskStore:
    return TaskStore(api)


@pytest.fixture()
def state(settings: SimpleNamespace, api: FakeTaskApi) -> AppState:
    """AppState wired through the real bootstrap with the in-memory backend."""
    return create_initial_state(settings=settings, api=api)
