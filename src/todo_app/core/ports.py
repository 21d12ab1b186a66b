# src/todo_app/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across layers.

The HTTP layer depends on TaskRepo, the client controller on TaskApi.
Concrete implementations (TaskStore, TaskApiClient) are wired in cli/bootstrap.py;
tests swap in fakes.
"""

from typing import Any, Protocol

from ..tasks.task_models import Task, TaskStats


class TaskRepo(Protocol):
    """Authoritative task storage (server side)."""

    def list_all(self) -> list[Task]: ...
    def get_by_id(self, task_id: int) -> Task | None: ...
    def create(self, text: Any) -> Task: ...
    def update(self, task_id: int, *, text: Any = None, completed: Any = None) -> Task | None: ...
    def delete(self, task_id: int) -> bool: ...
    def count_stats(self) -> TaskStats: ...


class TaskApi(Protocol):
    """
    Client-side view of the HTTP API.

    Every method except health_check raises ApiError on failure.
    """

    async def list_tasks(self) -> list[Task]: ...
    async def get_task(self, task_id: int) -> Task: ...
    async def create_task(self, text: str) -> Task: ...

    async def update_task(
            self,
            task_id: int,
            *,
            text: str | None = None,
            completed: bool | None = None,
    ) -> Task: ...

    async def delete_task(self, task_id: int) -> None: ...
    async def get_stats(self) -> TaskStats: ...
    async def health_check(self) -> bool: ...
