# src/todo_companion/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Maps each task's reminder to exactly one deferred callback on the asyncio
event loop:
- arm() always cancels the task's previous timer first, so there is at most
  one live timer per task id no matter how often it is called;
- a recurring reminder is a chain of one-shot timers: each fire computes the
  next occurrence from the stored date, persists it, and arms again, so any
  single occurrence can be cancelled or changed;
- timers are never persisted. After a restart arm_all() rebuilds them from the
  stored reminder dates.

Catch-up policy: a recurring reminder whose date already passed (the app was
not running) is NOT fired on arm. Its date is rolled forward past every missed
occurrence and only the next future one is armed. This avoids a burst of
stale notifications on reload. A past one-shot reminder is left expired and
shows as overdue.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable

from ..core.clock import local_now
from ..core.ports import Clock, ReminderDelivery
from .recurrence import next_occurrence, roll_forward
from .task_models import Task

logger = logging.getLogger(__name__)

TaskLookup = Callable[[str], Task | None]
Persist = Callable[[], object]


def reminder_message(task: Task) -> str:
    return f"Reminder: {task.text}"


class ReminderScheduler:
    """
    Owns the task id -> timer handle map; arm() and cancel() are its only mutators.

    The scheduler never keeps Task objects: callbacks carry only the id and
    look the task up again when they run, so deletions and completions that
    happen in between are respected.
    """

    def __init__(
        self,
        dispatcher: ReminderDelivery,
        *,
        task_lookup: TaskLookup,
        persist: Persist,
        clock: Clock = local_now,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._lookup = task_lookup
        self._persist = persist
        self._clock = clock
        self._loop = loop
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._inflight: set[asyncio.Task[None]] = set()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    # ---- queries ----

    def is_armed(self, task_id: str) -> bool:
        return task_id in self._timers

    def armed_ids(self) -> list[str]:
        return list(self._timers)

    # ---- arming ----

    def arm(self, task: Task) -> None:
        self.cancel(task.id)

        reminder = task.reminder
        if reminder is None or task.completed:
            return

        now = self._clock()
        if reminder.date <= now:
            if not reminder.recurring:
                logger.debug("Reminder for task %s expired at %s; not armed", task.id, reminder.date)
                return

            caught_up = roll_forward(reminder.date, reminder.repeat, now)
            logger.info(
                "Catching up %s reminder for task %s: %s -> %s",
                reminder.repeat,
                task.id,
                reminder.date.isoformat(),
                caught_up.isoformat(),
            )
            reminder.date = caught_up
            self._persist()
            now = self._clock()

        delay = max(0.0, (reminder.date - now).total_seconds())
        handle = self._get_loop().call_later(delay, self._on_timer, task.id)
        self._timers[task.id] = handle
        logger.debug("Armed reminder task=%s at=%s delay=%.1fs", task.id, reminder.date.isoformat(), delay)

    def arm_all(self, tasks: Iterable[Task]) -> int:
        """Arm every task that has a pending reminder. Returns how many timers are live."""
        for task in tasks:
            if task.reminder is not None:
                self.arm(task)
        return len(self._timers)

    def cancel(self, task_id: str) -> None:
        handle = self._timers.pop(task_id, None)
        if handle is not None:
            handle.cancel()
            logger.debug("Cancelled reminder timer task=%s", task_id)

    def cancel_all(self) -> None:
        for task_id in list(self._timers):
            self.cancel(task_id)
        for fut in list(self._inflight):
            fut.cancel()
        self._inflight.clear()

    # ---- firing ----

    def _on_timer(self, task_id: str) -> None:
        # The handle has run; it no longer counts as armed.
        self._timers.pop(task_id, None)

        fut = self._get_loop().create_task(self._fire(task_id))
        self._inflight.add(fut)
        fut.add_done_callback(self._inflight.discard)

    async def _fire(self, task_id: str) -> None:
        task = self._lookup(task_id)
        if task is None or task.reminder is None or task.completed:
            logger.debug("Timer for task %s fired but the reminder is gone; skipping", task_id)
            return

        fired_at = task.reminder.date
        try:
            await self._dispatcher.deliver(reminder_message(task))
        except Exception:
            logger.exception("Reminder delivery failed task=%s", task_id)

        # Re-read: the task may have been edited, completed or deleted while delivering.
        task = self._lookup(task_id)
        if task is None or task.reminder is None or task.completed:
            return
        if not task.reminder.recurring:
            return
        if task.id in self._timers or task.reminder.date != fired_at:
            # Reminder was saved again during delivery; that arm() wins.
            return

        task.reminder.date = next_occurrence(task.reminder.date, task.reminder.repeat)
        self._persist()
        logger.info("Recurring reminder task=%s next=%s", task_id, task.reminder.date.isoformat())
        self.arm(task)
