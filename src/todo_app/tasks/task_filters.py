# src/todo_app/tasks/task_filters.py

"""
Derived views over a task list: search, completion filter, display order.

Pure functions; the client controller recomputes them whenever its inputs change.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task, TaskFilter


def matches_query(task: Task, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    return q in task.text.lower()


def matches_filter(task: Task, active_filter: TaskFilter) -> bool:
    if active_filter == TaskFilter.COMPLETED:
        return task.completed
    if active_filter == TaskFilter.PENDING:
        return not task.completed
    return True


def filter_tasks(
    tasks: Iterable[Task],
    *,
    search_query: str = "",
    active_filter: TaskFilter = TaskFilter.ALL,
) -> list[Task]:
    """Search first (case-insensitive substring on text), then completion filter."""
    return [
        t
        for t in tasks
        if matches_query(t, search_query) and matches_filter(t, active_filter)
    ]


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Pending before completed; newest first within each group."""
    return sorted(tasks, key=lambda t: (t.completed, -t.created_at.timestamp()))
