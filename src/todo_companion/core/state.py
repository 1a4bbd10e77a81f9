# src/todo_companion/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..core.clock import local_now
from ..core.ports import BlobStore, Clock
from ..notify.dispatcher import NotificationDispatcher
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Explicitly wired application components.

    Built by cli.bootstrap (or by tests); nothing in the core reaches for a
    global instance.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: object

    blob: BlobStore
    task_store: TaskStore
    scheduler: ReminderScheduler
    dispatcher: NotificationDispatcher
    clock: Clock = local_now
