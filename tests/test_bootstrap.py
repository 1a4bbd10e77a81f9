# tests/test_bootstrap.py

from __future__ import annotations

from datetime import timedelta

import pytest

from todo_companion.cli.bootstrap import create_initial_state, shutdown, start_reminders
from todo_companion.core.clock import local_now
from todo_companion.core.ports import Permission
from todo_companion.tasks.task_models import Reminder, RepeatRule

from .fakes import FakePlatform, RecordingMessenger


@pytest.mark.asyncio
async def test_restart_rebuilds_timers_from_disk(settings) -> None:
    messenger = RecordingMessenger()
    platform = FakePlatform(current=Permission.DEFAULT, answer=Permission.GRANTED)

    first = create_initial_state(settings=settings, messenger=messenger, platform=platform)
    await start_reminders(first)
    upcoming = first.task_store.add("upcoming")
    upcoming.reminder = Reminder(date=local_now() + timedelta(hours=1))
    missed = first.task_store.add("missed daily")
    missed.reminder = Reminder(date=local_now() - timedelta(days=3), repeat=RepeatRule.DAILY)
    first.task_store.save()
    shutdown(first)
    assert first.scheduler.armed_ids() == []

    second = create_initial_state(settings=settings, messenger=messenger, platform=platform)
    armed = await start_reminders(second)

    assert armed == 2
    assert platform.requests == 1  # already granted, no second prompt
    reloaded = second.task_store.get(missed.id)
    assert reloaded is not None and reloaded.reminder is not None
    assert reloaded.reminder.date > local_now()
    shutdown(second)


@pytest.mark.asyncio
async def test_failed_save_shows_in_app_error(settings) -> None:
    messenger = RecordingMessenger()
    state = create_initial_state(settings=settings, messenger=messenger, platform=FakePlatform())
    await start_reminders(state)

    settings.store_path.unlink(missing_ok=True)
    settings.store_path.mkdir()  # a directory where the file should be: writes fail

    state.task_store.add("still here")

    assert ("Error saving tasks", "error") in messenger.shown
    assert len(state.task_store) == 1
    shutdown(state)
