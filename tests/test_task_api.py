# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from todo_companion.core.clock import as_local, local_now
from todo_companion.core.errors import ValidationError
from todo_companion.tasks.task_api import (
    THEME_KEY,
    TaskFilter,
    clear_reminder,
    filter_tasks,
    format_reminder_label,
    get_theme,
    is_overdue,
    open_reminder,
    save_reminder,
    set_theme,
    task_counts,
)
from todo_companion.tasks.task_models import Reminder, RepeatRule, Task
from todo_companion.tasks.task_store import TASKS_KEY


def _tomorrow() -> datetime:
    return local_now() + timedelta(days=1)


@pytest.mark.asyncio
async def test_save_reminder_arms_and_persists(state) -> None:
    task = state.task_store.add("dentist")
    when = _tomorrow()
    writes = state.blob.writes

    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), when.strftime("%H:%M"), "weekly")

    assert task.reminder is not None
    assert task.reminder.repeat == RepeatRule.WEEKLY
    assert task.reminder.date.strftime("%Y-%m-%d %H:%M") == when.strftime("%Y-%m-%d %H:%M")
    assert state.scheduler.is_armed(task.id)
    assert state.blob.writes > writes


@pytest.mark.asyncio
async def test_save_reminder_none_means_one_shot(state) -> None:
    task = state.task_store.add("call")
    when = _tomorrow()
    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), when.strftime("%H:%M"), "none")
    assert task.reminder is not None
    assert task.reminder.repeat is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("date", "time_str", "repeat"),
    [
        ("", "10:00", None),
        ("2030-01-01", None, None),
        ("2030-13-01", "10:00", None),
        ("2030-01-01", "25:61", None),
        ("2030-01-01", "10:00", "hourly"),
    ],
)
async def test_save_reminder_rejects_bad_input(state, date, time_str, repeat) -> None:
    task = state.task_store.add("x")
    with pytest.raises(ValidationError):
        save_reminder(state, task.id, date, time_str, repeat)
    assert task.reminder is None
    assert not state.scheduler.is_armed(task.id)


@pytest.mark.asyncio
async def test_save_reminder_unknown_task_is_noop(state) -> None:
    assert save_reminder(state, "ghost", "2030-01-01", "10:00") is None


@pytest.mark.asyncio
async def test_editing_reminder_twice_keeps_one_timer(state) -> None:
    task = state.task_store.add("edit me")
    when = _tomorrow()
    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), "08:00")
    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), "09:00", "daily")
    assert state.scheduler.armed_ids() == [task.id]


@pytest.mark.asyncio
async def test_open_reminder_prefills_from_existing(state) -> None:
    task = state.task_store.add("x")
    when = _tomorrow()
    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), "07:45", "monthly")

    form = open_reminder(state, task.id)

    assert form is not None
    assert form.date == when.strftime("%Y-%m-%d")
    assert form.time == "07:45"
    assert form.repeat == "monthly"


@pytest.mark.asyncio
async def test_open_reminder_defaults_to_now(state) -> None:
    task = state.task_store.add("x")
    form = open_reminder(state, task.id)
    assert form is not None
    assert form.repeat == "none"
    assert len(form.date) == 10
    assert len(form.time) == 5
    assert open_reminder(state, "ghost") is None


@pytest.mark.asyncio
async def test_clear_reminder_cancels_and_persists(state) -> None:
    task = state.task_store.add("x")
    when = _tomorrow()
    save_reminder(state, task.id, when.strftime("%Y-%m-%d"), "10:00")

    clear_reminder(state, task.id)

    assert task.reminder is None
    assert not state.scheduler.is_armed(task.id)
    assert '"reminder"' not in state.blob.data[TASKS_KEY]


@pytest.mark.asyncio
async def test_past_one_shot_is_overdue_and_unarmed(state) -> None:
    task = state.task_store.add("late")
    past = local_now() - timedelta(days=1)
    save_reminder(state, task.id, past.strftime("%Y-%m-%d"), past.strftime("%H:%M"))

    assert not state.scheduler.is_armed(task.id)
    assert is_overdue(task, local_now())

    state.task_store.toggle_complete(task.id)
    assert not is_overdue(task, local_now())


def test_filters_and_counts() -> None:
    now = local_now()
    tasks = [
        Task(id="1", text="a", created_at=now),
        Task(id="2", text="b", created_at=now, completed=True),
        Task(id="3", text="c", created_at=now),
    ]

    assert [t.id for t in filter_tasks(tasks, TaskFilter.PENDING)] == ["1", "3"]
    assert [t.id for t in filter_tasks(tasks, "completed")] == ["2"]
    assert len(filter_tasks(tasks)) == 3
    assert task_counts(tasks) == (2, 1)


def test_format_reminder_label() -> None:
    now = as_local(datetime(2024, 3, 1, 12, 0))

    same_year = Reminder(date=as_local(datetime(2024, 3, 4, 9, 5)))
    other_year = Reminder(date=as_local(datetime(2025, 1, 2, 18, 30)))
    repeating = Reminder(date=as_local(datetime(2024, 3, 4, 9, 5)), repeat=RepeatRule.WEEKDAYS)

    assert format_reminder_label(same_year, now) == "09:05, Mar 4"
    assert format_reminder_label(other_year, now) == "18:30, Jan 2, 2025"
    assert format_reminder_label(repeating, now) == "09:05, Weekdays"


@pytest.mark.asyncio
async def test_theme_preference(state) -> None:
    assert get_theme(state) == "light"

    assert set_theme(state, "Dark") is True
    assert state.blob.data[THEME_KEY] == "dark"
    assert get_theme(state) == "dark"

    with pytest.raises(ValidationError):
        set_theme(state, "purple")

    state.blob.data[THEME_KEY] = "garbage"
    assert get_theme(state) == "light"
