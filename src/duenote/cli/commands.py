# src/duenote/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime

from ..core.errors import IndexOutOfRangeError
from ..core.state import AppState
from ..tasks.task_models import Task, TaskPriority, as_local, format_due

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

INPUT_DUE_FORMAT = "%Y-%m-%d %H:%M"

ADD_USAGE = "Usage: /add YYYY-MM-DD HH:MM <low|medium|high> <title> | <description>"
EDIT_USAGE = "Usage: /edit N YYYY-MM-DD HH:MM <low|medium|high> <title> | <description>"


class CommandError(ValueError):
    """Bad command arguments; the message is shown to the user as-is."""


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

    async def handle(self, state: AppState, line: str) -> str | None:
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
            return await handler(state, args)
        except CommandError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----


def parse_due(date_part: str, time_part: str) -> datetime:
    try:
        naive = datetime.strptime(f"{date_part} {time_part}", INPUT_DUE_FORMAT)
    except ValueError:
        raise CommandError(f"Bad date/time '{date_part} {time_part}', expected YYYY-MM-DD HH:MM.") from None
    return as_local(naive)


def parse_task_fields(args: list[str], usage: str) -> tuple[datetime, TaskPriority, str, str]:
    """Parse `YYYY-MM-DD HH:MM <priority> <title> | <description>`."""
    if len(args) < 4:
        raise CommandError(usage)

    due_at = parse_due(args[0], args[1])
    try:
        priority = TaskPriority.parse(args[2])
    except ValueError:
        raise CommandError(f"Unknown priority '{args[2]}', use low, medium or high.") from None

    title, _, description = " ".join(args[3:]).partition("|")
    title = title.strip()
    description = description.strip()
    if not title or not description:
        raise CommandError("Please fill all fields: a title and a description are both required.")
    return due_at, priority, title, description


def parse_position(raw: str, state: AppState) -> int:
    """1-based position as shown by /list -> 0-based store index."""
    try:
        pos = int(raw)
    except ValueError:
        raise CommandError(f"'{raw}' is not a task number.") from None
    if not 1 <= pos <= len(state.store):
        raise CommandError(f"No task #{pos}. Use /list to see task numbers.")
    return pos - 1


def format_task_line(position: int, task: Task) -> str:
    mark = "x" if task.is_completed else " "
    return (
        f"{position:>3}. [{mark}] {task.title} ({task.priority.label}) "
        f"- due {format_due(task.due_at)}"
    )


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    if not tasks:
        return "No tasks yet! Add a task with /add."
    lines = ["Tasks sorted by due date (earliest first), then priority (High to Low):"]
    for i, task in enumerate(tasks, start=1):
        lines.append(format_task_line(i, task))
        if task.description:
            lines.append(f"       {task.description}")
    return "\n".join(lines)


async def cmd_add(state: AppState, args: list[str]) -> str:
    due_at, priority, title, description = parse_task_fields(args, ADD_USAGE)
    task = await state.store.add_task(title, description, due_at, priority)
    position = state.store.index_of(task) + 1
    return f"Added #{position}: {task.title} (due {format_due(task.due_at)})."


async def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandError(EDIT_USAGE)
    index = parse_position(args[0], state)
    due_at, priority, title, description = parse_task_fields(args[1:], EDIT_USAGE)

    current = state.store[index]
    edited = replace(current, title=title, description=description, due_at=due_at, priority=priority)
    try:
        task = await state.store.update_task(index, edited)
    except IndexOutOfRangeError:
        raise CommandError(f"No task #{index + 1}.") from None
    return f"Updated: {task.title} (due {format_due(task.due_at)})."


async def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done N -> toggle completion of task N
    """
    if not args:
        raise CommandError("Usage: /done N")
    index = parse_position(args[0], state)
    try:
        task = await state.store.toggle_completion(index)
    except IndexOutOfRangeError:
        raise CommandError(f"No task #{index + 1}.") from None
    return f"{'Completed' if task.is_completed else 'Reopened'}: {task.title}."


async def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        raise CommandError("Usage: /del N")
    index = parse_position(args[0], state)
    try:
        task = await state.store.delete_task(index)
    except IndexOutOfRangeError:
        raise CommandError(f"No task #{index + 1}.") from None
    return f"Deleted: {task.title}."


async def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    open_count = sum(1 for t in tasks if not t.is_completed)
    pending = state.dispatcher.pending_ids()
    fire_times = [ft for ft in (state.dispatcher.fire_time(n) for n in pending) if ft is not None]
    next_fire = format_due(min(fire_times)) if fire_times else "none"
    save = "FAILED" if state.store.last_save_error is not None else "OK"
    lead_minutes = getattr(state.settings, "reminder_lead_minutes", "?")
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({open_count} open)\n"
        f"  Notifications: {'ON' if state.notifications_granted else 'OFF (permission denied)'}\n"
        f"  Reminder lead time: {lead_minutes} min\n"
        f"  Pending reminders: {len(pending)} (next: {next_fire})\n"
        f"  Last save: {save}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add YYYY-MM-DD HH:MM <priority> <title> | <description>.")
registry.register("edit", cmd_edit, help_text="Edit task N (keeps its done state).")
registry.register("done", cmd_done, help_text="Toggle completion of task N.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete task N.", aliases=["rm", "delete"])
registry.register("status", cmd_status, help_text="Show counts, reminder lead time and pending reminders.")
