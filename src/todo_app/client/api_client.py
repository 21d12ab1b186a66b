# src/todo_app/client/api_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import ApiError
from ..tasks.task_models import Task, TaskStats

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class TaskApiClient:
    """
    Async client for the task HTTP API.

    Unwraps the {success, data, message, error} envelope. Any failure (transport error,
    non-JSON body, success=false) becomes ApiError carrying the server's error text when
    there is one.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---- low-level helpers ----

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        fallback_error: str,
    ) -> dict[str, Any]:
        logger.debug("API request: %s %s", method, path)
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("API request failed: %s %s (%s)", method, path, e.__class__.__name__)
            raise ApiError(fallback_error) from e

        logger.debug("API response: %s %s", resp.status_code, path)
        try:
            body = resp.json()
        except ValueError:
            raise ApiError(fallback_error, resp.status_code) from None

        if not isinstance(body, dict) or not body.get("success"):
            err = body.get("error") if isinstance(body, dict) else None
            logger.warning("API error response: %s %s -> %s %s", method, path, resp.status_code, err)
            raise ApiError(str(err or fallback_error), resp.status_code)
        return body

    @staticmethod
    def _task_from(body: dict[str, Any], fallback_error: str) -> Task:
        data = body.get("data")
        if not isinstance(data, dict):
            raise ApiError(fallback_error)
        try:
            return Task.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(fallback_error) from e

    # ---- public API ----

    async def list_tasks(self) -> list[Task]:
        err = "Failed to fetch tasks"
        body = await self._request("GET", "/api/tasks", fallback_error=err)
        data = body.get("data")
        if not isinstance(data, list):
            raise ApiError(err)
        try:
            return [Task.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(err) from e

    async def get_task(self, task_id: int) -> Task:
        err = "Failed to fetch task"
        body = await self._request("GET", f"/api/tasks/{task_id}", fallback_error=err)
        return self._task_from(body, err)

    async def create_task(self, text: str) -> Task:
        err = "Failed to create task"
        body = await self._request("POST", "/api/tasks", json={"text": text}, fallback_error=err)
        return self._task_from(body, err)

    async def update_task(
        self,
        task_id: int,
        *,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        err = "Failed to update task"
        payload: dict[str, Any] = {}
        if text is not None:
            payload["text"] = text
        if completed is not None:
            payload["completed"] = completed
        body = await self._request("PUT", f"/api/tasks/{task_id}", json=payload, fallback_error=err)
        return self._task_from(body, err)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/api/tasks/{task_id}", fallback_error="Failed to delete task")

    async def get_stats(self) -> TaskStats:
        err = "Failed to fetch task statistics"
        body = await self._request("GET", "/api/tasks/stats", fallback_error=err)
        data = body.get("data")
        if not isinstance(data, dict):
            raise ApiError(err)
        return TaskStats.from_dict(data)

    async def health_check(self) -> bool:
        """True only for a 200 from /health; never raises."""
        try:
            resp = await self._client.get("/health")
        except httpx.HTTPError:
            logger.debug("Health check failed.", exc_info=True)
            return False
        return resp.status_code == 200
