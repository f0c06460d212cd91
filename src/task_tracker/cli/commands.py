# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.state import AppState
from ..tasks.task_models import TaskStatus
from ..tasks.task_store import TaskNotFoundError, TaskSaveError
from .tokenizer import quote_args, tokenize

logger = logging.getLogger(__name__)

_ID = re.compile(r"[0-9]+")

EXAMPLES = [
    ["add", "Buy milk"],
    ["list", "todo"],
    ["mark-done", "1"],
]


@dataclass(slots=True)
class CommandResult:
    """What a command produced: lines for stdout, lines for stderr, and whether to end the session."""

    out: list[str] = field(default_factory=list)
    err: list[str] = field(default_factory=list)
    exit: bool = False


class UsageError(ValueError):
    """A required argument is missing or malformed."""


CommandHandler = Callable[[AppState, list[str]], CommandResult]


class CommandRegistry:
    """Command registry used by the console loop (add, list, help, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, tuple[str, str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        usage: str | None = None,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = (usage or key, help_text)
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, args: list[str]) -> CommandResult | None:
        """
        Run the command named by args[0] (case-insensitive).
        Returns None for an empty argument list.

        User errors (bad/missing arguments, unknown ids, failed saves) are
        turned into stderr lines here; the session always continues.
        """
        if not args:
            return None

        name = args[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return CommandResult(err=[f"Unknown command: {name}"])

        try:
            return handler(state, args[1:])
        except TaskNotFoundError as e:
            return CommandResult(err=[str(e)])
        except TaskSaveError as e:
            logger.warning("Save failed after %s: %s", name, e)
            return CommandResult(err=[f"Error: {e}"])
        except ValueError as e:
            # UsageError and store validation errors
            return CommandResult(err=[f"Error: {e}"])

    def handle_line(self, state: AppState, line: str) -> CommandResult | None:
        return self.handle(state, tokenize(line.strip()))

    def build_help(self) -> str:
        lines = [
            "",
            "--- Task Tracker CLI ---",
            "Manage your tasks from the command line.",
            "",
            "USAGE:",
            "Enter a command at the prompt. Use quotes for descriptions with spaces.",
            "",
            "COMMANDS:",
        ]
        for usage, help_text in self._help.values():
            lines.append(f"  {usage:<27}- {help_text}")
        lines += ["", "EXAMPLES:"]
        lines += [f"  > {quote_args(example)}" for example in EXAMPLES]
        lines.append("")
        return "\n".join(lines)


registry = CommandRegistry()


def _require(args: list[str], count: int, message: str) -> None:
    if len(args) < count:
        raise UsageError(message)


def _parse_id(raw: str) -> int:
    if not _ID.fullmatch(raw):
        raise UsageError("Invalid task ID. Please provide a number.")
    return int(raw)


def cmd_add(state: AppState, args: list[str]) -> CommandResult:
    _require(args, 1, "Task description is missing.")
    task_id = state.task_store.add_task(args[0])
    return CommandResult(out=[f"Task added successfully (ID: {task_id})"])


def cmd_list(state: AppState, args: list[str]) -> CommandResult:
    """
    list          -> all tasks
    list <status> -> only todo / in-progress / done
    """
    out = ["", "--- Your Tasks ---"]
    if state.task_store.count_tasks() == 0:
        out.append("No tasks yet. Use 'add \"<description>\"' to create one.")
        return CommandResult(out=out)

    listing = state.task_store.list_tasks(args[0] if args else None)
    if listing.warning:
        out.append(listing.warning)

    if listing.tasks:
        out.extend(t.render() for t in listing.tasks)
    else:
        out.append("No tasks match the specified filter.")
    out += ["------------------", ""]
    return CommandResult(out=out)


def cmd_update(state: AppState, args: list[str]) -> CommandResult:
    _require(args, 2, "Task ID and new description are required.")
    task_id = _parse_id(args[0])
    state.task_store.update_task(task_id, args[1])
    return CommandResult(out=[f"Task {task_id} updated successfully."])


def cmd_delete(state: AppState, args: list[str]) -> CommandResult:
    _require(args, 1, "Task ID is required.")
    task_id = _parse_id(args[0])
    state.task_store.delete_task(task_id)
    return CommandResult(out=[f"Task {task_id} deleted successfully."])


def _mark(state: AppState, args: list[str], status: TaskStatus) -> CommandResult:
    _require(args, 1, "Task ID is required.")
    task_id = _parse_id(args[0])
    state.task_store.set_task_status(task_id, status)
    return CommandResult(out=[f"Task {task_id} marked as {status.label}."])


def cmd_mark_done(state: AppState, args: list[str]) -> CommandResult:
    return _mark(state, args, TaskStatus.DONE)


def cmd_mark_in_progress(state: AppState, args: list[str]) -> CommandResult:
    return _mark(state, args, TaskStatus.IN_PROGRESS)


def cmd_help(state: AppState, args: list[str]) -> CommandResult:
    return CommandResult(out=[registry.build_help()])


def cmd_exit(state: AppState, args: list[str]) -> CommandResult:
    return CommandResult(out=["Goodbye! 👋"], exit=True)


registry.register("add", cmd_add, help_text="Adds a new task.", usage='add "<description>"')
registry.register(
    "list",
    cmd_list,
    help_text="Lists tasks. Optional status: todo, in-progress, done.",
    usage="list [status]",
)
registry.register(
    "update",
    cmd_update,
    help_text="Updates the description of an existing task.",
    usage='update <id> "<new_desc>"',
)
registry.register("delete", cmd_delete, help_text="Deletes a task.", usage="delete <id>")
registry.register("mark-done", cmd_mark_done, help_text="Marks a task as done.", usage="mark-done <id>")
registry.register(
    "mark-in-progress",
    cmd_mark_in_progress,
    help_text="Marks a task as in-progress.",
    usage="mark-in-progress <id>",
)
registry.register("help", cmd_help, help_text="Shows this help message.", aliases=["h", "?"])
registry.register("exit", cmd_exit, help_text="Exits the application.", aliases=["quit"])
