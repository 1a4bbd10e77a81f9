# src/todo_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (blob store, task store,
  scheduler, notification dispatcher),
- loads persisted tasks and arms their reminders.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.clock import local_now
from ..core.errors import PersistenceError
from ..core.ports import InAppMessenger, NotificationPlatform
from ..core.state import AppState
from ..notify.desktop import NotifySendPlatform
from ..notify.dispatcher import NotificationDispatcher
from ..storage.blob_store import JsonFileBlobStore
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    messenger: InAppMessenger,
    settings=None,
    platform: NotificationPlatform | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if platform is None:
        platform = NotifySendPlatform(mode=settings.desktop_notifications)

    def _report_persist_error(err: PersistenceError) -> None:
        messenger.show_message("Error saving tasks", "error")

    blob = JsonFileBlobStore(settings.store_path)
    task_store = TaskStore(blob, clock=local_now, on_persist_error=_report_persist_error)
    dispatcher = NotificationDispatcher(platform, messenger, title=settings.notification_title)
    scheduler = ReminderScheduler(
        dispatcher,
        task_lookup=task_store.get,
        persist=task_store.save,
        clock=local_now,
    )
    task_store.attach_scheduler(scheduler)

    return AppState(
        settings=settings,
        blob=blob,
        task_store=task_store,
        scheduler=scheduler,
        dispatcher=dispatcher,
        clock=local_now,
    )


async def start_reminders(state: AppState) -> int:
    """
    Load persisted tasks and arm their reminders. Must run inside the event loop.

    Returns the number of live timers.
    """
    if getattr(state.settings, "request_permission_on_load", True):
        await state.dispatcher.request_permission_on_load()

    tasks = state.task_store.load()
    armed = state.scheduler.arm_all(tasks)
    logger.info("Loaded %d task(s), %d reminder(s) armed", len(tasks), armed)
    return armed


def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # Every mutation already saved; only the timers need tearing down.
    try:
        state.scheduler.cancel_all()
    except Exception:
        logger.exception("Cancelling reminder timers failed.")
