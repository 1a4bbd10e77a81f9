# src/todo_companion/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Iterable

from ..core.clock import local_now
from ..core.errors import PersistenceError, ValidationError
from ..core.ports import BlobStore, Clock, ReminderTimers
from .task_models import Priority, Task

logger = logging.getLogger(__name__)

TASKS_KEY = "todos"


class TaskStore:
    """
    In-memory ordered task list backed by a single persisted blob.

    Order is the user's order: new tasks go to the front, set_order() replaces
    it wholesale. Every mutation writes the full list back (no partial
    updates). A failed write is reported, never raised: the in-memory list
    stays authoritative for the session.

    Reminder timers live in the scheduler; the store only tells it when a
    task disappears or changes completion state.
    """

    def __init__(
        self,
        blob: BlobStore,
        *,
        clock: Clock = local_now,
        on_persist_error: Callable[[PersistenceError], None] | None = None,
    ) -> None:
        self._blob = blob
        self._clock = clock
        self._tasks: list[Task] = []
        self._timers: ReminderTimers | None = None
        self.on_persist_error = on_persist_error

    def attach_scheduler(self, timers: ReminderTimers) -> None:
        self._timers = timers

    # ---- persistence ----

    def load(self) -> list[Task]:
        """
        Replace the in-memory list with the persisted one.

        Absent or unparseable data loads as an empty list; entries that do not
        match the schema are dropped. Never raises.
        """
        raw = None
        try:
            raw = self._blob.read(TASKS_KEY)
        except Exception:
            logger.exception("Reading %r failed; starting empty.", TASKS_KEY)

        self._tasks = self._decode(raw)
        logger.info("TaskStore loaded total=%d", len(self._tasks))
        return list(self._tasks)

    @staticmethod
    def _decode(raw: str | None) -> list[Task]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Persisted tasks are not valid JSON; discarding.")
            return []
        if not isinstance(data, list):
            logger.warning("Persisted tasks are not a list; discarding.")
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for item in data:
            try:
                if not isinstance(item, dict):
                    raise TypeError("task entry is not an object")
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Dropping malformed task entry: %s", e)
                continue
            if task.id in seen:
                logger.warning("Dropping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def save(self) -> bool:
        """Write the full ordered list. Returns False if the medium rejected it."""
        payload = json.dumps([t.to_dict() for t in self._tasks], ensure_ascii=False)
        try:
            self._blob.write(TASKS_KEY, payload)
        except Exception as e:
            err = PersistenceError(TASKS_KEY, e)
            logger.exception("Saving tasks failed (in-memory state kept).")
            if self.on_persist_error is not None:
                try:
                    self.on_persist_error(err)
                except Exception:
                    logger.exception("on_persist_error hook failed.")
            return False
        return True

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the ordered list (the Task objects themselves are shared)."""
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- mutations ----

    def _new_id(self) -> str:
        candidate = int(time.time() * 1000)
        existing = {t.id for t in self._tasks}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    @staticmethod
    def _clean_text(text: str | None) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a task")
        return cleaned

    @staticmethod
    def _clean_priority(priority: Priority | str | None) -> Priority | None:
        if priority is None or isinstance(priority, Priority):
            return priority
        if not priority.strip():
            return None
        parsed = Priority.parse(priority)
        if parsed is None:
            raise ValidationError("Priority must be one of: low, medium, high")
        return parsed

    def add(self, text: str, priority: Priority | str | None = None) -> Task:
        cleaned = self._clean_text(text)
        prio = self._clean_priority(priority)

        task = Task(id=self._new_id(), text=cleaned, created_at=self._clock(), priority=prio)
        self._tasks.insert(0, task)
        self.save()
        logger.debug("Task added id=%s priority=%s", task.id, prio)
        return task

    def remove(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False

        if self._timers is not None:
            self._timers.cancel(task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self.save()
        logger.debug("Task removed id=%s", task_id)
        return True

    def toggle_complete(self, task_id: str) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None

        task.completed = not task.completed
        if self._timers is not None:
            if task.completed:
                self._timers.cancel(task_id)
            elif task.reminder is not None:
                # Future reminders are armed again; past recurring ones catch up.
                self._timers.arm(task)
        self.save()
        logger.debug("Task id=%s completed=%s", task_id, task.completed)
        return task

    def edit(self, task_id: str, text: str) -> Task | None:
        cleaned = self._clean_text(text)
        task = self.get(task_id)
        if task is None:
            return None
        task.text = cleaned
        self.save()
        return task

    def set_priority(self, task_id: str, priority: Priority | str | None) -> Task | None:
        prio = self._clean_priority(priority)
        task = self.get(task_id)
        if task is None:
            return None
        task.priority = prio
        self.save()
        return task

    def set_order(self, task_ids: Iterable[str]) -> bool:
        """
        Reorder to `task_ids`, which must be a permutation of the current ids.

        Returns False (and writes nothing) when the order is unchanged.
        """
        new_ids = list(task_ids)
        current_ids = [t.id for t in self._tasks]

        if len(new_ids) != len(current_ids) or set(new_ids) != set(current_ids):
            raise ValidationError("New order must contain every task exactly once")

        if new_ids == current_ids:
            return False

        by_id = {t.id: t for t in self._tasks}
        self._tasks = [by_id[i] for i in new_ids]
        self.save()
        logger.debug("Task order updated")
        return True

    def move(self, task_id: str, position: int) -> bool:
        """Move one task to `position` (0-based, clamped). Convenience over set_order()."""
        ids = [t.id for t in self._tasks]
        if task_id not in ids:
            return False
        ids.remove(task_id)
        position = max(0, min(len(ids), int(position)))
        ids.insert(position, task_id)
        return self.set_order(ids)

    def clear_completed(self) -> int:
        done = [t for t in self._tasks if t.completed]
        if not done:
            return 0

        if self._timers is not None:
            for t in done:
                self._timers.cancel(t.id)
        self._tasks = [t for t in self._tasks if not t.completed]
        self.save()
        logger.info("Cleared %d completed task(s)", len(done))
        return len(done)
