# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskmaster.cli.main import resolve_log_levels
from taskmaster.config import DEFAULT_API_BASE_URL, Settings
from taskmaster.logging_setup import _ConsoleNoiseFilter, setup_logging

_VARS = (
    "TASKMASTER_APP_NAME",
    "TASKMASTER_LOG_LEVEL",
    "TASKMASTER_API_BASE_URL",
    "TASKMASTER_REQUEST_TIMEOUT_SECONDS",
    "TASKMASTER_DATA_DIR",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.app_name == "TaskMaster Pro"
    assert s.api_base_url == DEFAULT_API_BASE_URL
    assert s.request_timeout_seconds == 10.0
    assert s.data_dir == Path(".local/taskmaster")


def test_settings_from_env(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKMASTER_API_BASE_URL", "http://tasks.local:8080/api/")
    clean_env.setenv("TASKMASTER_REQUEST_TIMEOUT_SECONDS", "2.5")
    clean_env.setenv("TASKMASTER_DATA_DIR", str(tmp_path))

    s = Settings.from_env()

    assert s.api_base_url == "http://tasks.local:8080/api"
    assert s.request_timeout_seconds == 2.5
    assert s.data_dir == tmp_path


@pytest.mark.parametrize("raw", ["", "abc", "0", "-3"])
def test_bad_timeout_falls_back_to_default(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("TASKMASTER_REQUEST_TIMEOUT_SECONDS", raw)
    assert Settings.from_env().request_timeout_seconds == 10.0


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_page_clean() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("taskmaster.tasks.task_store", logging.INFO))
    assert not f.filter(_record("taskmaster.connectors.console_connector", logging.INFO))
    assert f.filter(_record("taskmaster.connectors.console_connector", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskmaster.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "taskmaster.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            if h not in saved:
                h.close()
        for h in saved:
            root.addHandler(h)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("DEBUG", (logging.WARNING, logging.DEBUG)),
        ("info", (logging.WARNING, logging.INFO)),
        ("ERROR", (logging.ERROR, logging.ERROR)),
        ("nonsense", (logging.WARNING, logging.INFO)),
    ],
)
def test_log_level_drives_file_log_and_floors_console(name: str, expected: tuple[int, int]) -> None:
    assert resolve_log_levels(name) == expected


def test_console_filter_hides_captured_warnings() -> None:
    f = _ConsoleNoiseFilter()
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("py.warnings", logging.ERROR))
