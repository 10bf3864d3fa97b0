# src/taskmaster/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from .console_view import render_page

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _clear_screen() -> None:
    """Best-effort: only clear when attached to a TTY."""
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[H\033[2J")
            sys.stdout.flush()
    except Exception:
        logger.debug("Clear screen failed.", exc_info=True)


def draw(state: AppState) -> None:
    app_name = str(getattr(state.settings, "app_name", "TaskMaster Pro"))
    editing = state.editing.task_id if state.editing is not None else None
    text, visible = render_page(
        state.store.state,
        app_name=app_name,
        expanded=state.expanded,
        editing=editing,
    )
    # Row numbers in commands refer to exactly what was drawn.
    state.last_view = visible
    _clear_screen()
    print(text)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slow operations (probe, reload)
        print(f"[{_ts_local()}] {text}", flush=True)

    emit("Checking server...")
    await state.store.check_connection()

    reply: str | None = None
    while True:
        draw(state)
        if reply:
            print(f"\n{reply}")
        print("\nType /help for commands, /exit to quit.")

        try:
            user_input = (await asyncio.to_thread(input, "> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        reply = None
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Type /help to list them."

    logger.info("Console connector finished.")
