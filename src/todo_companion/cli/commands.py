# src/todo_companion/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import ValidationError
from ..core.state import AppState
from ..tasks.task_api import (
    TaskFilter,
    clear_reminder,
    filter_tasks,
    format_reminder_label,
    get_theme,
    is_overdue,
    save_reminder,
    set_theme,
    task_counts,
)
from ..tasks.task_models import Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValidationError as e:
            return e.reason

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(state: AppState, ref: str | None) -> Task | None:
    """A task by 1-based position in the full list, or by id."""
    if not ref:
        return None
    tasks = state.task_store.tasks
    if ref.isdigit() and 1 <= int(ref) <= len(tasks):
        return tasks[int(ref) - 1]
    return state.task_store.get(ref)


def _render_line(pos: int, task: Task, state: AppState) -> str:
    now = state.clock()
    box = "[x]" if task.completed else "[ ]"
    prio = f" !{task.priority.value}" if task.priority else ""
    line = f"{pos:>3}. {box} {task.text}{prio}"
    if task.reminder is not None:
        label = format_reminder_label(task.reminder, now)
        flag = " OVERDUE" if is_overdue(task, now) else ""
        line += f"  (reminder {label}{flag})"
    return line


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                 -> all tasks
    /list pending         -> only open tasks
    /list completed       -> only done tasks
    """
    which = args[0].lower() if args else TaskFilter.ALL.value
    if which not in {f.value for f in TaskFilter}:
        return "Usage: /list [all|pending|completed]"

    all_tasks = state.task_store.tasks
    shown = {t.id for t in filter_tasks(all_tasks, which)}
    active, completed = task_counts(all_tasks)

    lines = [_render_line(i, t, state) for i, t in enumerate(all_tasks, start=1) if t.id in shown]
    if not lines:
        lines = ["No tasks here yet."]
    lines.append(f"Active: {active}  Completed: {completed}")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add [!low|!medium|!high] text..."""
    priority = None
    if args and args[0].startswith("!"):
        priority = Priority.parse(args[0][1:])
        if priority is None:
            return "Priority must be one of: !low, !medium, !high"
        args = args[1:]
    task = state.task_store.add(" ".join(args), priority)
    return f"Task added: {task.text}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None:
        return "Usage: /done <n|id>"
    state.task_store.toggle_complete(task.id)
    return f"{'Completed' if task.completed else 'Reopened'}: {task.text}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None:
        return "Usage: /rm <n|id>"
    state.task_store.remove(task.id)
    return "Task deleted"


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None:
        return "Usage: /edit <n|id> new text..."
    state.task_store.edit(task.id, " ".join(args[1:]))
    return f"Task updated: {task.text}"


def cmd_prio(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None or len(args) < 2:
        return "Usage: /prio <n|id> low|medium|high|none"
    if args[1].lower() == "none":
        priority = None
    else:
        priority = Priority.parse(args[1])
        if priority is None:
            return "Usage: /prio <n|id> low|medium|high|none"
    state.task_store.set_priority(task.id, priority)
    return f"Priority set: {priority.value if priority else 'none'}"


def cmd_move(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None or len(args) < 2 or not args[1].isdigit():
        return "Usage: /move <n|id> <position>"
    changed = state.task_store.move(task.id, int(args[1]) - 1)
    return "Task order updated" if changed else "Order unchanged"


def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = state.task_store.clear_completed()
    if removed == 0:
        return "No completed tasks to clear"
    return f"Cleared {removed} completed task{'s' if removed > 1 else ''}"


def cmd_remind(state: AppState, args: list[str]) -> str:
    """
    /remind <n|id> YYYY-MM-DD HH:MM [none|daily|weekdays|weekly|monthly|yearly]
    """
    task = _resolve(state, args[0] if args else None)
    if task is None:
        return "Usage: /remind <n|id> YYYY-MM-DD HH:MM [repeat]"
    date = args[1] if len(args) > 1 else None
    time_str = args[2] if len(args) > 2 else None
    repeat = args[3] if len(args) > 3 else None
    save_reminder(state, task.id, date, time_str, repeat)
    return "Reminder set successfully"


def cmd_unremind(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args[0] if args else None)
    if task is None:
        return "Usage: /unremind <n|id>"
    clear_reminder(state, task.id)
    return "Reminder cleared"


def cmd_theme(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return f"Theme: {get_theme(state)}"
    if not set_theme(state, args[0]):
        if emit:
            with contextlib.suppress(Exception):
                emit("Could not save theme preference.")
    return f"Theme set to {args[0].lower()}"


def cmd_status(state: AppState, args: list[str]) -> str:
    active, completed = task_counts(state.task_store.tasks)
    armed = len(state.scheduler.armed_ids())
    return (
        "Status:\n"
        f"  Tasks: {active} active, {completed} completed\n"
        f"  Reminders armed: {armed}\n"
        f"  Theme: {get_theme(state)}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks: /list [all|pending|completed].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add [!high] text.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del"])
registry.register("edit", cmd_edit, help_text="Edit task text: /edit <n> text.")
registry.register("prio", cmd_prio, help_text="Set priority: /prio <n> low|medium|high|none.")
registry.register("move", cmd_move, help_text="Reorder: /move <n> <position>.")
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register(
    "remind", cmd_remind, help_text="Set reminder: /remind <n> YYYY-MM-DD HH:MM [repeat]."
)
registry.register("unremind", cmd_unremind, help_text="Clear a reminder: /unremind <n>.")
registry.register("theme", cmd_theme, help_text="Show or set theme: /theme [light|dark].")
registry.register("status", cmd_status, help_text="Show counters and armed reminders.")
