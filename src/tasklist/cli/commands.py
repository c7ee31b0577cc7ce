# src/tasklist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import cast

from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks import task_view
from ..tasks.task_models import Task, TaskFilter, TaskId

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

DUE_PREFIX = "due:"


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
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Plain text without a leading '/' adds a task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


class UsageError(ValueError):
    """Bad command arguments; the message is shown to the user as-is."""


def parse_task_id(raw: str) -> TaskId:
    """Ids are ints when created here; stored string ids are matched verbatim."""
    raw = raw.strip()
    if not raw:
        raise UsageError("Missing task id.")
    try:
        return int(raw)
    except ValueError:
        return raw


def parse_due(raw: str) -> date | None:
    """'YYYY-MM-DD' -> date; 'none' or empty -> None."""
    value = raw.strip().lower()
    if value in ("", "none", "-"):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise UsageError(f"Invalid due date {raw!r}. Use YYYY-MM-DD or 'none'.") from e


def split_text_and_due(args: Sequence[str]) -> tuple[str, date | None, bool]:
    """
    Split '/add buy milk due:2025-01-10' style arguments.

    Returns (text, due_date, due_given). The last due: token wins.
    """
    words: list[str] = []
    due: date | None = None
    due_given = False
    for a in args:
        if a.lower().startswith(DUE_PREFIX):
            due = parse_due(a[len(DUE_PREFIX):])
            due_given = True
        else:
            words.append(a)
    return " ".join(words).strip(), due, due_given


def resolve_task_id(repo: TaskRepo, raw: str, task_filter: TaskFilter = TaskFilter.ALL) -> TaskId:
    """
    Accept a task id or a 1-based row number from the current listing.

    Lookup order: integer id, the raw string as a stored id (loaded data may
    carry digit-only string ids), then row number.
    """
    task_id = parse_task_id(raw)
    if repo.get(task_id) is not None:
        return task_id

    raw = raw.strip()
    if raw != task_id and repo.get(raw) is not None:
        return raw

    if isinstance(task_id, int) and task_id >= 1:
        rows = task_view.visible_tasks(repo.snapshot(), task_filter)
        if task_id <= len(rows):
            return rows[task_id - 1].id
    return task_id


def _resolve_id(state: AppState, raw: str) -> TaskId:
    return resolve_task_id(state.task_store, raw, state.task_filter)


# ---- rendering ----


def format_task(task: Task, *, index: int | None = None, today: date | None = None) -> str:
    box = "[x]" if task.completed else "[ ]"
    parts = []
    if index is not None:
        parts.append(f"{index:>2}.")
    parts.append(box)
    parts.append(task.text)
    if task.due_date is not None:
        parts.append(f"(due {task.due_date.isoformat()})")
    if task_view.is_overdue(task, today):
        parts.append("OVERDUE")
    created = task.created_at.strftime("%Y-%m-%d %H:%M")
    return " ".join(parts) + f"  #{task.id} created {created}"


def render_list(state: AppState, task_filter: TaskFilter | None = None, today: date | None = None) -> str:
    f = task_filter or state.task_filter
    rows = task_view.visible_tasks(state.task_store.snapshot(), f)
    c = state.task_store.counts()
    header = f"Tasks [{f.value}] total={c.total} completed={c.completed} pending={c.pending}"
    if not rows:
        return f"{header}\n  {task_view.empty_message(f)}"
    lines = [header]
    for i, t in enumerate(rows, start=1):
        lines.append("  " + format_task(t, index=i, today=today))
    return "\n".join(lines)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <text> [due:YYYY-MM-DD]"""
    try:
        text, due, _ = split_text_and_due(args)
    except UsageError as e:
        return str(e)

    task = state.task_store.add(text, due)
    if task is None:
        return "Nothing added: task text is empty."
    return f"Added #{task.id}: {task.text}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """/list [all|pending|completed]  (does not change the current filter)"""
    f = state.task_filter
    if args:
        try:
            f = TaskFilter.parse(args[0])
        except ValueError:
            return "Usage: /list [all|pending|completed]"
    return render_list(state, f)


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current filter: {state.task_filter.value}. Use /filter all|pending|completed."
    try:
        state.task_filter = TaskFilter.parse(args[0])
    except ValueError:
        return "Usage: /filter all|pending|completed"
    return render_list(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <id|row>  toggles completion."""
    if not args:
        return "Usage: /done <id|row>"
    try:
        task_id = _resolve_id(state, args[0])
    except UsageError as e:
        return str(e)

    if not state.task_store.toggle(task_id):
        return f"No task #{task_id}."
    task = state.task_store.get(task_id)
    status = "completed" if task is not None and task.completed else "pending"
    return f"Task #{task_id} marked {status}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id|row>"
    try:
        task_id = _resolve_id(state, args[0])
    except UsageError as e:
        return str(e)

    if not state.task_store.delete(task_id):
        return f"No task #{task_id}."

    if state.edit.active_edit_id == task_id:
        state.edit.cancel()
        return f"Deleted #{task_id} (edit cancelled)."
    return f"Deleted #{task_id}."


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <id|row>   -> begin editing (shows the draft)
    Then: /commit [text] [due:YYYY-MM-DD|due:none] or /cancel
    """
    if not args:
        if state.edit.active:
            return (
                f"Editing #{state.edit.active_edit_id}: {state.edit.draft_text!r} "
                f"due={state.edit.draft_due_date or 'none'}"
            )
        return "Usage: /edit <id|row>"

    try:
        task_id = _resolve_id(state, args[0])
    except UsageError as e:
        return str(e)

    task = state.task_store.get(task_id)
    if task is None:
        return f"No task #{task_id}."

    if state.edit.active and state.edit.active_edit_id != task.id and emit:
        emit(f"Discarding unsaved edit of #{state.edit.active_edit_id}.")

    state.edit.begin(task)
    due = task.due_date.isoformat() if task.due_date else "none"
    return (
        f"Editing #{task.id}: {task.text!r} due={due}\n"
        "  /commit [new text] [due:YYYY-MM-DD|due:none] to save, /cancel to discard."
    )


def cmd_commit(state: AppState, args: list[str]) -> str:
    if not state.edit.active:
        return "No edit in progress. Use /edit <id|row> first."

    try:
        text, due, due_given = split_text_and_due(args)
    except UsageError as e:
        return str(e)

    session = state.edit
    task_id = session.active_edit_id
    new_text = text if text else session.draft_text
    new_due = due if due_given else session.draft_due_date

    # Blank text or a vanished task: the edit is simply discarded.
    changed = state.task_store.edit(task_id, new_text, new_due)
    session.cancel()
    if not changed:
        return f"Edit of #{task_id} discarded."
    return f"Saved #{task_id}."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not state.edit.active:
        return "No edit in progress."
    task_id = state.edit.active_edit_id
    state.edit.cancel()
    return f"Edit of #{task_id} cancelled."


def cmd_stats(state: AppState, args: list[str]) -> str:
    c = state.task_store.counts()
    overdue = sum(1 for t in state.task_store.snapshot() if task_view.is_overdue(t))
    return (
        "Stats:\n"
        f"  Total: {c.total}\n"
        f"  Completed: {c.completed}\n"
        f"  Pending: {c.pending}\n"
        f"  Overdue: {overdue}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text> [due:YYYY-MM-DD].", aliases=["a"])
registry.register(
    "list", cmd_list, help_text="Show tasks: /list [all|pending|completed].", aliases=["ls", "l"]
)
registry.register("filter", cmd_filter, help_text="Set the default listing: /filter all|pending|completed.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id|row>.", aliases=["toggle", "x"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <id|row>.", aliases=["delete", "rm"])
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <id|row>.", aliases=["e"])
registry.register(
    "commit", cmd_commit, help_text="Save the edit: /commit [text] [due:YYYY-MM-DD|due:none]."
)
registry.register("cancel", cmd_cancel, help_text="Discard the edit in progress.")
registry.register("stats", cmd_stats, help_text="Show totals (completed/pending/overdue).")
