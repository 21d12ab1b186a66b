# src/todo_app/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_models import Task, TaskFilter, TaskStats


@dataclass
class ClientState:
    """
    What the console client renders.

    tasks/stats are a derived copy of the server's list; they only change after the
    server confirms a mutation (or on a full reload).
    """

    tasks: list[Task] = field(default_factory=list)
    stats: TaskStats = field(default_factory=TaskStats)

    is_loading: bool = True
    error: str | None = None
    is_online: bool = True

    search_query: str = ""
    active_filter: TaskFilter = TaskFilter.ALL

    # ids with a toggle/delete request in flight
    busy_ids: set[int] = field(default_factory=set)
