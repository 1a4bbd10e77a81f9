# src/todo_companion/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.clock import parse_iso


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> Priority | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class RepeatRule(StrEnum):
    """How a reminder recurs. Absence of a rule means one-shot."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw: str | None) -> RepeatRule | None:
        """Map form input to a rule; "none"/empty means one-shot. Unknown values raise ValueError."""
        if raw is None:
            return None
        value = raw.strip().lower()
        if value in ("", "none"):
            return None
        return cls(value)


@dataclass(slots=True)
class Reminder:
    # Always the next pending fire time, never the original creation time.
    date: datetime
    repeat: RepeatRule | None = None

    @property
    def recurring(self) -> bool:
        return self.repeat is not None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"date": self.date.isoformat()}
        if self.repeat is not None:
            out["repeat"] = self.repeat.value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reminder:
        raw_date = data["date"]
        if not isinstance(raw_date, str):
            raise ValueError("reminder.date must be an ISO-8601 string")
        repeat_raw = data.get("repeat")
        repeat = RepeatRule(repeat_raw) if repeat_raw else None
        return cls(date=parse_iso(raw_date), repeat=repeat)


@dataclass(slots=True)
class Task:
    id: str
    text: str
    created_at: datetime
    completed: bool = False
    priority: Priority | None = None
    reminder: Reminder | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(),
        }
        if self.priority is not None:
            out["priority"] = self.priority.value
        if self.reminder is not None:
            out["reminder"] = self.reminder.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from its persisted form.

        Raises (KeyError/TypeError/ValueError) on schema mismatch; the store
        decides what to do with a bad entry.
        """
        task_id = data["id"]
        text = data["text"]
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("id must be a non-empty string")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("text must be a non-empty string")

        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError("completed must be a bool")

        reminder_raw = data.get("reminder")
        reminder = None
        if reminder_raw is not None:
            if not isinstance(reminder_raw, dict):
                raise ValueError("reminder must be an object")
            reminder = Reminder.from_dict(reminder_raw)

        priority_raw = data.get("priority")
        priority = Priority(priority_raw) if priority_raw else None

        return cls(
            id=task_id,
            text=text,
            created_at=parse_iso(data["createdAt"]),
            completed=completed,
            priority=priority,
            reminder=reminder,
        )
