# src/todo_companion/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_APP_LOGGER = "todo_companion"
LOG_FILE_NAME = "todo.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while the REPL is waiting for input:
    - todo_companion logs pass at the handler's level
    - asyncio passes from WARNING up (slow timer callbacks, unretrieved task errors)
    - everything else, captured warnings included, only from ERROR up
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == _APP_LOGGER or name.startswith(_APP_LOGGER + "."):
            return True

        if name == "asyncio":
            return record.levelno >= logging.WARNING

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send filtered logs to stderr and everything to <log_dir>/todo.log.

    The data directory doubles as the log directory so one setting moves both.
    Returns the log file path. Call once, before the first log record.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
