# src/taskmaster/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console page until /exit.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        await shutdown_state(state)


def resolve_log_levels(level_name: str) -> tuple[int, int]:
    """
    Map settings.log_level to (console_level, file_level).

    The file log follows the configured level; the console never goes below
    WARNING so log lines do not tear up the redrawn page.
    """
    level = getattr(logging, str(level_name).strip().upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    return max(level, logging.WARNING), level


def main() -> None:
    settings = get_settings()

    console_level, file_level = resolve_log_levels(getattr(settings, "log_level", "INFO"))
    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        file_level=file_level,
    )

    logger.info("Starting %s (api=%s, log=%s)...", settings.app_name, settings.api_base_url, log_file)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
