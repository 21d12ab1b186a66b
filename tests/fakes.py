# tests/fakes.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from flask.testing import FlaskClient

from todo_app.core.errors import ApiError
from todo_app.tasks.task_models import Task, TaskStats

BASE_TS = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_task(task_id: int, text: str, *, completed: bool = False, minutes: int = 0) -> Task:
    ts = BASE_TS + timedelta(minutes=minutes)
    return Task(id=task_id, text=text, completed=completed, created_at=ts, updated_at=ts)


class FakeTaskApi:
    """
    In-memory TaskApi used by controller and command tests.

    - `fail = True` makes every data call raise ApiError (health_check is separate)
    - `healthy` is what health_check reports
    - calls are captured for assertions
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[int, Task] = {t.id: t for t in tasks or []}
        self.fail = False
        self.healthy = True
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._next_id = 1000

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail:
            raise ApiError("Service unavailable", 503)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def list_tasks(self) -> list[Task]:
        self._record("list_tasks")
        return list(self.tasks.values())

    async def get_task(self, task_id: int) -> Task:
        self._record("get_task", task_id)
        if task_id not in self.tasks:
            raise ApiError("Task not found", 404)
        return self.tasks[task_id]

    async def create_task(self, text: str) -> Task:
        self._record("create_task", text)
        self._next_id += 1
        task = make_task(self._next_id, text.strip(), minutes=self._next_id)
        self.tasks[task.id] = task
        return task

    async def update_task(
        self,
        task_id: int,
        *,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        self._record("update_task", task_id, text, completed)
        current = self.tasks.get(task_id)
        if current is None:
            raise ApiError("Task not found", 404)
        updated = replace(
            current,
            text=current.text if text is None else text,
            completed=current.completed if completed is None else completed,
            updated_at=current.updated_at + timedelta(seconds=1),
        )
        self.tasks[task_id] = updated
        return updated

    async def delete_task(self, task_id: int) -> None:
        self._record("delete_task", task_id)
        if self.tasks.pop(task_id, None) is None:
            raise ApiError("Task not found", 404)

    async def get_stats(self) -> TaskStats:
        self._record("get_stats")
        return TaskStats.from_tasks(self.tasks.values())

    async def health_check(self) -> bool:
        self.calls.append(("health_check", ()))
        return self.healthy


def flask_transport(flask_client: FlaskClient) -> httpx.MockTransport:
    """
    httpx transport that forwards requests to a Flask test client.

    Lets TaskApiClient talk to the real app without opening a socket.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        headers = {
            k: v for k, v in request.headers.items() if k.lower() in ("content-type", "origin")
        }
        resp = flask_client.open(
            request.url.path,
            method=request.method,
            data=request.content,
            headers=headers,
            query_string=request.url.query.decode("ascii"),
        )
        return httpx.Response(
            resp.status_code,
            headers={"Content-Type": resp.content_type},
            content=resp.get_data(),
        )

    return httpx.MockTransport(handler)


def offline_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)
