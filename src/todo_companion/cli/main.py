# src/todo_companion/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks and arms their reminders,
then runs the console REPL on the same event loop as the timers.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown, start_reminders
from ..config import get_settings
from ..connectors.console_connector import ConsoleMessenger, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings, messenger=ConsoleMessenger())
    try:
        await start_reminders(state)
        await run_console_loop(state)
    finally:
        shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s... (store=%s, log=%s)", settings.app_name, settings.store_path, log_file)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
