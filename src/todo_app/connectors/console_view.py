# src/todo_app/connectors/console_view.py

"""Plain-text rendering of the controller state for the console."""

from __future__ import annotations

from datetime import datetime

from ..client.controller import TaskController
from ..tasks.task_filters import sort_for_display
from ..tasks.task_models import Task, TaskFilter

MAX_TASK_TEXT = 500


def format_date(ts: datetime) -> str:
    return ts.astimezone().strftime("%b %d, %H:%M")


def visible_tasks(controller: TaskController) -> list[Task]:
    """The filtered list in display order; row numbers in the console index into this."""
    return sort_for_display(controller.filtered_tasks)


def render_task(row: int, task: Task, *, busy: bool = False) -> str:
    mark = "x" if task.completed else " "
    flag = " (working...)" if busy else ""
    dates = f"created {format_date(task.created_at)}"
    if task.updated_at != task.created_at:
        dates += f", updated {format_date(task.updated_at)}"
    return f"{row:>3}. [{mark}] {task.text}{flag}\n       {dates}"


def render_stats(controller: TaskController) -> str:
    s = controller.state.stats
    return f"Total: {s.total} | Completed: {s.completed} | Pending: {s.pending}"


def render_filters(controller: TaskController) -> str:
    counts = controller.filtered_stats
    active = controller.state.active_filter
    parts = []
    for f, n in (
        (TaskFilter.ALL, counts.total),
        (TaskFilter.PENDING, counts.pending),
        (TaskFilter.COMPLETED, counts.completed),
    ):
        label = f"{f.value} ({n})"
        parts.append(f"*{label}*" if f == active else label)

    line = "Filter: " + " | ".join(parts)
    query = controller.state.search_query.strip()
    if query:
        line += f'   Search: "{query}"'
    return line


def render_task_list(controller: TaskController) -> str:
    state = controller.state
    if state.is_loading:
        return "Loading tasks..."

    tasks = visible_tasks(controller)
    if not tasks:
        if state.tasks:
            return "No tasks match the current search/filter."
        return "No tasks yet. Add your first task to get started!"

    return "\n".join(
        render_task(i, t, busy=controller.is_busy(t.id)) for i, t in enumerate(tasks, start=1)
    )


def render_view(controller: TaskController, *, app_name: str = "TodoApp") -> str:
    state = controller.state
    status = "Connected" if state.is_online else "Offline"
    lines = [
        f"=== {app_name} === [{status}]",
        render_stats(controller),
    ]
    if state.error:
        lines.append(f"[!] {state.error} Use /retry to reload.")
    lines.append(render_filters(controller))
    lines.append("")
    lines.append(render_task_list(controller))
    return "\n".join(lines)
