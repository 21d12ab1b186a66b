# src/todo_app/client/controller.py

from __future__ import annotations

"""
Client-side task controller.

Owns the client's copy of the task list and everything derived from it:
- stats over the unfiltered list (adjusted incrementally after each confirmed mutation)
- the filtered view (search + completion filter) and its own stats
- connectivity (last call outcome + periodic /health polling)

Mutations are committed locally only after the server confirms them. A failed call
leaves tasks/stats exactly as they were, so there is nothing to revert.
"""

import asyncio
import contextlib
import logging
from dataclasses import replace

from ..core.errors import ApiError
from ..core.ports import TaskApi
from ..core.state import ClientState
from ..tasks.task_filters import filter_tasks
from ..tasks.task_models import Task, TaskFilter, TaskStats

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load tasks. Please check your connection."
CREATE_ERROR = "Failed to create task. Please try again."
UPDATE_ERROR = "Failed to update task. Please try again."
DELETE_ERROR = "Failed to delete task. Please try again."


async def run_health_polling(
        controller: TaskController,
        *,
        interval_seconds: float = 30.0,
) -> None:
    """
    Every interval_seconds: call /health and set is_online.

    Never touches tasks/stats. To stop polling, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)
        await controller.check_connection()


class TaskController:
    def __init__(self, api: TaskApi, *, health_interval_seconds: float = 30.0) -> None:
        self._api = api
        self._health_interval = health_interval_seconds
        self._poller: asyncio.Task[None] | None = None
        self.state = ClientState()

    # ---- derived view ----

    @property
    def filtered_tasks(self) -> list[Task]:
        return filter_tasks(
            self.state.tasks,
            search_query=self.state.search_query,
            active_filter=self.state.active_filter,
        )

    @property
    def filtered_stats(self) -> TaskStats:
        return TaskStats.from_tasks(self.filtered_tasks)

    def set_search_query(self, query: str) -> None:
        self.state.search_query = query

    def set_filter(self, active_filter: TaskFilter | str) -> None:
        self.state.active_filter = TaskFilter(active_filter)

    def is_busy(self, task_id: int) -> bool:
        return task_id in self.state.busy_ids

    def find_task(self, task_id: int) -> Task | None:
        for t in self.state.tasks:
            if t.id == task_id:
                return t
        return None

    # ---- loading ----

    async def load_tasks(self) -> None:
        """Fetch the full list and recompute stats from scratch. Does not raise on failure."""
        try:
            self.state.error = None
            tasks = await self._api.list_tasks()
            self.state.tasks = tasks
            self.state.stats = TaskStats.from_tasks(tasks)
            self.state.is_online = True
            logger.info("Loaded %d tasks", len(tasks))
        except ApiError as e:
            logger.warning("Error loading tasks: %s", e.message)
            self.state.error = LOAD_ERROR
            self.state.is_online = False
        finally:
            self.state.is_loading = False

    async def retry(self) -> None:
        self.state.is_loading = True
        await self.load_tasks()

    # ---- mutations ----

    def _fail(self, message: str, exc: ApiError) -> None:
        logger.warning("%s (%s)", message, exc.message)
        self.state.error = message
        self.state.is_online = False

    async def create_task(self, text: str) -> Task:
        self.state.error = None
        try:
            task = await self._api.create_task(text)
        except ApiError as e:
            self._fail(CREATE_ERROR, e)
            raise

        self.state.tasks = [task, *self.state.tasks]
        s = self.state.stats
        self.state.stats = replace(s, total=s.total + 1, pending=s.pending + 1)
        self.state.is_online = True
        return task

    async def toggle_task(self, task_id: int, completed: bool) -> Task | None:
        """Returns None (no request made) if this task already has a request in flight."""
        if self.is_busy(task_id):
            logger.debug("Toggle ignored; task %s is busy", task_id)
            return None

        self.state.error = None
        self.state.busy_ids.add(task_id)
        try:
            updated = await self._api.update_task(task_id, completed=completed)
        except ApiError as e:
            self._fail(UPDATE_ERROR, e)
            raise
        finally:
            self.state.busy_ids.discard(task_id)

        prior = self.find_task(task_id)
        self.state.tasks = [updated if t.id == task_id else t for t in self.state.tasks]

        if prior is not None and prior.completed != updated.completed:
            s = self.state.stats
            if updated.completed:
                self.state.stats = replace(s, completed=s.completed + 1, pending=s.pending - 1)
            else:
                self.state.stats = replace(s, completed=s.completed - 1, pending=s.pending + 1)

        self.state.is_online = True
        return updated

    async def delete_task(self, task_id: int) -> bool:
        """Returns False (no request made) if this task already has a request in flight."""
        if self.is_busy(task_id):
            logger.debug("Delete ignored; task %s is busy", task_id)
            return False

        self.state.error = None
        self.state.busy_ids.add(task_id)
        try:
            await self._api.delete_task(task_id)
        except ApiError as e:
            self._fail(DELETE_ERROR, e)
            raise
        finally:
            self.state.busy_ids.discard(task_id)

        prior = self.find_task(task_id)
        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]

        if prior is not None:
            s = self.state.stats
            if prior.completed:
                self.state.stats = replace(s, total=s.total - 1, completed=s.completed - 1)
            else:
                self.state.stats = replace(s, total=s.total - 1, pending=s.pending - 1)

        self.state.is_online = True
        return True

    # ---- connectivity ----

    async def check_connection(self) -> bool:
        online = await self._api.health_check()
        if online != self.state.is_online:
            logger.info("Connectivity changed: %s", "online" if online else "offline")
        self.state.is_online = online
        return online

    def start_health_polling(self) -> None:
        if self._poller is not None and not self._poller.done():
            return
        self._poller = asyncio.create_task(
            run_health_polling(self, interval_seconds=self._health_interval)
        )

    async def stop(self) -> None:
        """Cancel health polling and wait for it to finish."""
        poller, self._poller = self._poller, None
        if poller is None:
            return
        poller.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await poller
