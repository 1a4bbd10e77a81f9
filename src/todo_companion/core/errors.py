# src/todo_companion/core/errors.py

from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by the task list core."""


class ValidationError(TodoError, ValueError):
    """
    A user operation was rejected.

    `reason` is short and user-facing; the state that the operation would have
    touched is left unchanged.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PersistenceError(TodoError):
    """The blob medium rejected a write (disk full, permissions, ...)."""

    def __init__(self, key: str, cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to persist {key!r}: {cause}")
        self.key = key
        self.cause = cause
