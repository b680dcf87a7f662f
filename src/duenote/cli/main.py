# src/duenote/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks (re-arming their reminders),
then runs the console front-end until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state, start_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNoticeSink, ConsoleReminderSink, run_console_loop
from ..logging_setup import setup_logging_from_settings

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(
        settings=settings,
        reminder_sink=ConsoleReminderSink(),
        notices=ConsoleNoticeSink(),
    )
    try:
        await start_state(state)
        await run_console_loop(state)
    finally:
        shutdown_state(state)


def main() -> None:
    settings = get_settings()
    log_file = setup_logging_from_settings(settings)

    logger.info("Starting %s... (log file: %s)", getattr(settings, "app_name", "duenote"), log_file)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
