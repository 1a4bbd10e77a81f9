# src/todo_companion/core/clock.py

from __future__ import annotations

from datetime import datetime


def local_now() -> datetime:
    """Current time as an aware datetime in the host's local timezone."""
    return datetime.now().astimezone()


def as_local(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware local one.

    Naive values are interpreted as host local wall-clock time.
    """
    return value.astimezone()


def parse_iso(raw: str) -> datetime:
    """Parse an ISO-8601 string (a trailing 'Z' is accepted) into a local aware datetime."""
    return as_local(datetime.fromisoformat(raw))
