# src/todo_companion/tasks/recurrence.py

"""
Recurrence calculator.

Pure date arithmetic for recurring reminders. Steps are taken on local
wall-clock time, so a 09:00 daily reminder stays at 09:00 across DST changes.
Month and year steps keep the day-of-month and roll any overflow into the
following month, the way calendar arithmetic on a date object does: Jan 31
becomes Mar 2 (leap year) or Mar 3, Feb 29 becomes Mar 1 of the next year.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from ..core.clock import as_local
from .task_models import RepeatRule

_SATURDAY = 5
_SUNDAY = 6


def _with_rollover(wall: datetime, delta: relativedelta) -> datetime:
    # Step from the 1st so relativedelta never clamps, then add the days back.
    first = wall.replace(day=1) + delta
    return first + timedelta(days=wall.day - 1)


def _step(wall: datetime, repeat: RepeatRule) -> datetime:
    if repeat == RepeatRule.DAILY:
        return wall + timedelta(days=1)

    if repeat == RepeatRule.WEEKDAYS:
        nxt = wall + timedelta(days=1)
        while nxt.weekday() in (_SATURDAY, _SUNDAY):
            nxt += timedelta(days=1)
        return nxt

    if repeat == RepeatRule.WEEKLY:
        return wall + timedelta(days=7)

    if repeat == RepeatRule.MONTHLY:
        return _with_rollover(wall, relativedelta(months=1))

    if repeat == RepeatRule.YEARLY:
        return _with_rollover(wall, relativedelta(years=1))

    return wall


def next_occurrence(date: datetime, repeat: RepeatRule | str | None) -> datetime:
    """
    Return the occurrence that follows `date` under `repeat`.

    An absent or unknown rule returns `date` unchanged; callers must not use
    this for one-shot reminders.
    """
    if not repeat:
        return date
    try:
        rule = RepeatRule(repeat)
    except ValueError:
        return date

    local = as_local(date)
    wall = local.replace(tzinfo=None)
    # Naive -> astimezone() re-resolves the local UTC offset for the new date.
    return _step(wall, rule).astimezone()


def roll_forward(date: datetime, repeat: RepeatRule | str | None, now: datetime) -> datetime:
    """
    Advance `date` one occurrence at a time until it is strictly after `now`.

    Used for catch-up: a daily reminder missed for five days takes five steps
    and lands on today or tomorrow at the same time of day.
    """
    if not repeat:
        return date

    current = date
    while current <= now:
        nxt = next_occurrence(current, repeat)
        if nxt <= current:
            # Unknown rule: identity would loop forever.
            return current
        current = nxt
    return current
