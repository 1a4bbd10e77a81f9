# tests/conftest.py

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from todo_companion.core.clock import local_now
from todo_companion.core.state import AppState
from todo_companion.notify.dispatcher import NotificationDispatcher
from todo_companion.tasks.task_scheduler import ReminderScheduler
from todo_companion.tasks.task_store import TaskStore

from .fakes import FakePlatform, MemoryBlobStore, RecordingDelivery, RecordingMessenger


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        store_path=tmp_path / "data" / "store.json",
        desktop_notifications="auto",
        request_permission_on_load=True,
        notification_title="To-Do Reminder",
        default_theme="light",
    )


@pytest.fixture()
def blob() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def delivery() -> RecordingDelivery:
    return RecordingDelivery()


@pytest_asyncio.fixture()
async def store_and_scheduler(
    blob: MemoryBlobStore, delivery: RecordingDelivery
) -> AsyncIterator[tuple[TaskStore, ReminderScheduler]]:
    """Real TaskStore + ReminderScheduler on the running test loop."""
    store = TaskStore(blob)
    scheduler = ReminderScheduler(delivery, task_lookup=store.get, persist=store.save)
    store.attach_scheduler(scheduler)
    yield store, scheduler
    scheduler.cancel_all()


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace, blob: MemoryBlobStore) -> AsyncIterator[AppState]:
    """AppState wired with in-memory blob and a scriptable platform."""
    messenger = RecordingMessenger()
    dispatcher = NotificationDispatcher(FakePlatform(), messenger)
    store = TaskStore(blob)
    scheduler = ReminderScheduler(dispatcher, task_lookup=store.get, persist=store.save)
    store.attach_scheduler(scheduler)

    app = AppState(
        settings=settings,
        blob=blob,
        task_store=store,
        scheduler=scheduler,
        dispatcher=dispatcher,
        clock=local_now,
    )
    yield app
    scheduler.cancel_all()
