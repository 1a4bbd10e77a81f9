# src/todo_companion/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleMessenger:
    """In-app fallback channel: timestamped lines on the console."""

    def show_message(self, text: str, kind: str = "info") -> None:
        _print_ts(f"[{kind.upper()}] {text}")


async def run_console_loop(state: AppState) -> None:
    """
    Read commands until /exit or EOF.

    input() runs in the default executor so reminder timers keep firing on the
    loop while the prompt waits; the commands themselves run on the loop thread.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    loop = asyncio.get_running_loop()

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            user_input = (await loop.run_in_executor(None, input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for /add.
            user_input = f"/add {user_input}"

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console connector finished.")
