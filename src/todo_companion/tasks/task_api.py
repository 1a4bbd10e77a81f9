# src/todo_companion/tasks/task_api.py

from __future__ import annotations

"""
Presentation-facing helpers.

The reminder form round trip (open_reminder / save_reminder / clear_reminder)
and the read-only queries a front end needs to render the list: filters,
counters, overdue badges and reminder labels. Also the theme preference blob.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.errors import ValidationError
from ..core.state import AppState
from .task_models import RepeatRule, Reminder, Task

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
THEMES = ("light", "dark")

_REPEAT_LABELS = {
    RepeatRule.DAILY: "Every day",
    RepeatRule.WEEKDAYS: "Weekdays",
    RepeatRule.WEEKLY: "Weekly",
    RepeatRule.MONTHLY: "Monthly",
    RepeatRule.YEARLY: "Yearly",
}


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class ReminderForm:
    """Prefilled values for the reminder editor (local date/time strings)."""

    task_id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    repeat: str  # "none" or a RepeatRule value


# ---- reminders ----


def open_reminder(state: AppState, task_id: str) -> ReminderForm | None:
    """Form values for a task's reminder; defaults to "now, no repeat" when it has none."""
    task = state.task_store.get(task_id)
    if task is None:
        return None

    if task.reminder is not None:
        when = task.reminder.date.astimezone()
        repeat = task.reminder.repeat.value if task.reminder.repeat else "none"
    else:
        when = state.clock()
        repeat = "none"

    return ReminderForm(
        task_id=task_id,
        date=when.strftime("%Y-%m-%d"),
        time=when.strftime("%H:%M"),
        repeat=repeat,
    )


def _parse_form_datetime(date: str | None, time_str: str | None) -> datetime:
    date = (date or "").strip()
    time_str = (time_str or "").strip()
    if not date or not time_str:
        raise ValidationError("Please select both date and time")
    try:
        naive = datetime.strptime(f"{date}T{time_str}", "%Y-%m-%dT%H:%M")
    except ValueError:
        raise ValidationError("Invalid date or time") from None
    return naive.astimezone()


def save_reminder(
    state: AppState,
    task_id: str,
    date: str | None,
    time_str: str | None,
    repeat: str | None = None,
) -> Task | None:
    """
    Create or replace a task's reminder from form input and arm it.

    Raises ValidationError (task untouched) on missing/invalid date or time or
    an unknown repeat rule. Returns None if the task does not exist.
    """
    task = state.task_store.get(task_id)
    if task is None:
        return None

    when = _parse_form_datetime(date, time_str)
    try:
        rule = RepeatRule.parse(repeat)
    except ValueError:
        raise ValidationError(f"Unknown repeat rule: {repeat}") from None

    task.reminder = Reminder(date=when, repeat=rule)
    state.scheduler.arm(task)
    state.task_store.save()
    logger.info("Reminder set task=%s at=%s repeat=%s", task_id, task.reminder.date.isoformat(), rule)
    return task


def clear_reminder(state: AppState, task_id: str) -> Task | None:
    task = state.task_store.get(task_id)
    if task is None:
        return None

    state.scheduler.cancel(task_id)
    if task.reminder is not None:
        task.reminder = None
        state.task_store.save()
        logger.info("Reminder cleared task=%s", task_id)
    return task


# ---- queries ----


def filter_tasks(tasks: list[Task], which: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
    which = TaskFilter(which)
    if which == TaskFilter.PENDING:
        return [t for t in tasks if not t.completed]
    if which == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def task_counts(tasks: list[Task]) -> tuple[int, int]:
    """(active, completed)"""
    active = sum(1 for t in tasks if not t.completed)
    return active, len(tasks) - active


def is_overdue(task: Task, now: datetime) -> bool:
    return task.reminder is not None and not task.completed and task.reminder.date < now


def format_reminder_label(reminder: Reminder, now: datetime) -> str:
    """
    Short label like "09:30, Mar 4" (year added when not the current one),
    or "09:30, Weekdays" for recurring reminders.
    """
    d = reminder.date.astimezone()
    time_str = d.strftime("%H:%M")

    if reminder.repeat is not None:
        return f"{time_str}, {_REPEAT_LABELS.get(reminder.repeat, '')}"

    date_str = f"{d.strftime('%b')} {d.day}"
    if d.year != now.year:
        date_str += f", {d.year}"
    return f"{time_str}, {date_str}"


# ---- theme preference ----


def get_theme(state: AppState) -> str:
    default = str(getattr(state.settings, "default_theme", "light"))
    try:
        raw = state.blob.read(THEME_KEY)
    except Exception:
        logger.exception("Reading theme preference failed.")
        return default
    return raw if raw in THEMES else default


def set_theme(state: AppState, theme: str) -> bool:
    """Persist the theme. Raises ValidationError for unknown themes; returns False if the write failed."""
    theme = (theme or "").strip().lower()
    if theme not in THEMES:
        raise ValidationError(f"Theme must be one of: {', '.join(THEMES)}")
    try:
        state.blob.write(THEME_KEY, theme)
    except Exception:
        logger.exception("Saving theme preference failed.")
        return False
    return True
