# src/todo_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the storage medium and notification channels swappable and makes
testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol

Clock = Callable[[], datetime]
# Returns an aware "now"; injectable so tests can pin time.


class Permission(StrEnum):
    """Notification permission as reported by the platform."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"  # not decided yet


class BlobStore(Protocol):
    """
    Persistent key-value medium holding serialized string blobs.

    `write` raises when the medium rejects the value (quota, I/O).
    """

    def read(self, key: str) -> str | None: ...
    def write(self, key: str, value: str) -> None: ...


class NotificationPlatform(Protocol):
    """Platform notification capability. Every call is treated as fallible."""

    def is_supported(self) -> bool: ...
    def permission(self) -> Permission: ...
    async def request_permission(self) -> Permission: ...
    async def show(self, title: str, body: str) -> bool: ...


class InAppMessenger(Protocol):
    """Ephemeral in-app message (toast); the fallback delivery channel."""

    def show_message(self, text: str, kind: str = "info") -> None: ...


class ReminderDelivery(Protocol):
    """What the scheduler needs from the notification dispatcher."""

    async def deliver(self, message: str) -> Any: ...


class ReminderTimers(Protocol):
    """What the task store needs from the reminder scheduler."""

    def arm(self, task: Any) -> None: ...
    def cancel(self, task_id: str) -> None: ...
