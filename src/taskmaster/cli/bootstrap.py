# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- builds the HTTP client with the configured base URL and timeout,
- wires the prober and the task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.connectivity import ConnectivityProber
from ..core.state import AppState
from ..tasks.task_api import TaskApiClient
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, api=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the API) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if api is None:
        api = TaskApiClient(
            settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
        )

    store = TaskStore(api, ConnectivityProber(api))
    logger.info(
        "State ready base_url=%s timeout=%.1fs",
        getattr(settings, "api_base_url", "?"),
        float(getattr(settings, "request_timeout_seconds", 0.0)),
    )
    return AppState(settings=settings, store=store, api=api)


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    close = getattr(state.api, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.debug("API client close failed.", exc_info=True)
