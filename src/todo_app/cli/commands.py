# src/todo_app/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..client.controller import TaskController
from ..connectors.console_view import (
    MAX_TASK_TEXT,
    render_stats,
    render_task_list,
    render_view,
    visible_tasks,
)
from ..core.errors import ApiError
from ..tasks.task_models import Task, TaskFilter

CommandEmitter = Callable[[str], None]
CommandConfirm = Callable[[str], Awaitable[bool]]
CommandHandler2 = Callable[[TaskController, list[str]], Awaitable[str]]
CommandHandler4 = Callable[
    [TaskController, list[str], CommandEmitter | None, CommandConfirm | None], Awaitable[str]
]
CommandHandler = CommandHandler2 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /done, ...)."""

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

    async def handle(
        self,
        controller: TaskController,
        line: str,
        emit: CommandEmitter | None = None,
        confirm: CommandConfirm | None = None,
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

        nparams = len(inspect.signature(handler).parameters)
        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return await h4(controller, args, emit, confirm)

        h2 = cast(CommandHandler2, handler)
        return await h2(controller, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Plain text (no leading /) adds a task.")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task(controller: TaskController, ref: str) -> Task | None:
    """
    Resolve a row number from the last rendered list, or a raw task id.

    Row numbers win when both could match.
    """
    try:
        n = int(ref.lstrip("#"))
    except ValueError:
        return None

    rows = visible_tasks(controller)
    if 1 <= n <= len(rows):
        return rows[n - 1]
    return controller.find_task(n)


async def cmd_help(controller: TaskController, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(controller: TaskController, args: list[str]) -> str:
    return render_view(controller)


async def cmd_stats(controller: TaskController, args: list[str]) -> str:
    f = controller.filtered_stats
    return (
        f"All tasks: {render_stats(controller)}\n"
        f"Current view: Total: {f.total} | Completed: {f.completed} | Pending: {f.pending}"
    )


async def cmd_add(controller: TaskController, args: list[str]) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <task text>"
    if len(text) > MAX_TASK_TEXT:
        return f"Task text is too long ({len(text)}/{MAX_TASK_TEXT} characters)."

    try:
        task = await controller.create_task(text)
    except ApiError:
        return controller.state.error or "Failed to create task."
    return f"Added: {task.text}"


async def _set_completed(controller: TaskController, args: list[str], completed: bool | None) -> str:
    if not args:
        return "Usage: /done <row>, /undo <row> or /toggle <row>"

    task = resolve_task(controller, args[0])
    if task is None:
        return f"No task at {args[0]}."

    target = (not task.completed) if completed is None else completed
    if target == task.completed:
        return f"Already {'completed' if target else 'pending'}: {task.text}"

    try:
        updated = await controller.toggle_task(task.id, target)
    except ApiError:
        return controller.state.error or "Failed to update task."
    if updated is None:
        return "That task is still being updated."
    return f"{'Completed' if updated.completed else 'Reopened'}: {updated.text}"


async def cmd_done(controller: TaskController, args: list[str]) -> str:
    return await _set_completed(controller, args, True)


async def cmd_undo(controller: TaskController, args: list[str]) -> str:
    return await _set_completed(controller, args, False)


async def cmd_toggle(controller: TaskController, args: list[str]) -> str:
    return await _set_completed(controller, args, None)


async def cmd_rm(
    controller: TaskController,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: CommandConfirm | None = None,
) -> str:
    """
    /rm <row>      -> delete after confirmation
    /rm <row> -y   -> delete without asking
    """
    if not args:
        return "Usage: /rm <row> [-y]"

    task = resolve_task(controller, args[0])
    if task is None:
        return f"No task at {args[0]}."

    skip_confirm = any(a in ("-y", "--yes") for a in args[1:])
    if not skip_confirm and confirm is not None:
        if not await confirm(f"Delete '{task.text}'?"):
            return "Aborted."

    try:
        deleted = await controller.delete_task(task.id)
    except ApiError:
        return controller.state.error or "Failed to delete task."
    if not deleted:
        return "That task is still being updated."
    return f"Deleted: {task.text}"


async def cmd_search(controller: TaskController, args: list[str]) -> str:
    """
    /search          -> clear the search
    /search <words>  -> case-insensitive substring match on task text
    """
    query = " ".join(args).strip()
    controller.set_search_query(query)
    header = f'Search: "{query}"' if query else "Search cleared."
    return f"{header}\n{render_task_list(controller)}"


async def cmd_filter(controller: TaskController, args: list[str]) -> str:
    if not args:
        return f"Filter is {controller.state.active_filter.value}. Use /filter all|pending|completed."

    try:
        controller.set_filter(TaskFilter.parse(args[0]))
    except ValueError:
        return "Usage: /filter all|pending|completed"
    return f"Filter: {controller.state.active_filter.value}\n{render_task_list(controller)}"


async def cmd_retry(
    controller: TaskController,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: CommandConfirm | None = None,
) -> str:
    if emit:
        emit("Reloading tasks...")
    await controller.retry()
    return render_view(controller)


async def cmd_status(controller: TaskController, args: list[str]) -> str:
    state = controller.state
    online = "Connected" if state.is_online else "Offline"
    return (
        "Status:\n"
        f"  Connection: {online}\n"
        f"  Tasks loaded: {len(state.tasks)}\n"
        f"  Filter: {state.active_filter.value}\n"
        f"  Search: {state.search_query.strip() or '(none)'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("done", cmd_done, help_text="Mark a task completed: /done <row>.")
registry.register("undo", cmd_undo, help_text="Mark a task pending again: /undo <row>.")
registry.register("toggle", cmd_toggle, help_text="Flip a task's completion: /toggle <row>.", aliases=["t"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <row> [-y].", aliases=["del", "delete"])
registry.register("search", cmd_search, help_text="Search task text: /search [words].", aliases=["s"])
registry.register("filter", cmd_filter, help_text="Filter: /filter all | pending | completed.", aliases=["f"])
registry.register("stats", cmd_stats, help_text="Show totals for all tasks and the current view.")
registry.register("retry", cmd_retry, help_text="Reload tasks from the server.", aliases=["reload"])
registry.register("status", cmd_status, help_text="Show connection and view settings.")
