# src/todo_app/api/routes.py

"""
HTTP routes.

Handlers only parse input and call the store; failures are raised as
core.errors exceptions and turned into responses by the handlers in api/app.py.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from flask import Blueprint, current_app, request

from ..core.errors import InvalidIdentifierError, NotFoundError, ValidationError
from ..core.ports import TaskRepo
from ..tasks.task_models import format_ts, utcnow
from .responses import envelope

logger = logging.getLogger(__name__)

STORE_KEY = "todo_app.task_store"
SETTINGS_KEY = "todo_app.settings"

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")
service_bp = Blueprint("service", __name__)


def _store() -> TaskRepo:
    return current_app.extensions[STORE_KEY]


def _settings() -> Any:
    return current_app.extensions[SETTINGS_KEY]


_TASK_ID_RE = re.compile(r"-?[0-9]+")


def _parse_task_id(raw: str) -> int:
    # ASCII digits only: no "1_000", "+5" or non-ASCII digits.
    raw = raw.strip()
    if not _TASK_ID_RE.fullmatch(raw):
        raise InvalidIdentifierError()
    return int(raw)


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---- tasks ----


@tasks_bp.get("")
def list_tasks():
    tasks = _store().list_all()
    return envelope(
        200,
        data=[t.to_dict() for t in tasks],
        message=f"Retrieved {len(tasks)} tasks",
    )


@tasks_bp.get("/stats")
def task_stats():
    return envelope(200, data=_store().count_stats().to_dict())


@tasks_bp.get("/<task_id>")
def get_task(task_id: str):
    tid = _parse_task_id(task_id)
    task = _store().get_by_id(tid)
    if task is None:
        raise NotFoundError()
    return envelope(200, data=task.to_dict())


@tasks_bp.post("")
def create_task():
    body = _json_body()
    text = body.get("text")
    if not text:
        raise ValidationError("Task text is required")

    task = _store().create(text)
    logger.info("Created task id=%s", task.id)
    return envelope(201, data=task.to_dict(), message="Task created successfully")


@tasks_bp.put("/<task_id>")
def update_task(task_id: str):
    tid = _parse_task_id(task_id)
    body = _json_body()

    task = _store().update(tid, text=body.get("text"), completed=body.get("completed"))
    if task is None:
        raise NotFoundError()
    logger.info("Updated task id=%s", tid)
    return envelope(200, data=task.to_dict(), message="Task updated successfully")


@tasks_bp.delete("/<task_id>")
def delete_task(task_id: str):
    tid = _parse_task_id(task_id)
    if not _store().delete(tid):
        raise NotFoundError()
    logger.info("Deleted task id=%s", tid)
    return envelope(200, message="Task deleted successfully")


# ---- service ----


@service_bp.get("/health")
def health():
    settings = _settings()
    return {
        "success": True,
        "message": f"{settings.app_name} Backend is running",
        "timestamp": format_ts(utcnow()),
        "version": settings.version,
    }, 200


@service_bp.get("/")
def index():
    settings = _settings()
    return {
        "success": True,
        "message": f"Welcome to {settings.app_name} API",
        "version": settings.version,
        "endpoints": {
            "health": "GET /health",
            "tasks": {
                "getAll": "GET /api/tasks",
                "getById": "GET /api/tasks/:id",
                "create": "POST /api/tasks",
                "update": "PUT /api/tasks/:id",
                "delete": "DELETE /api/tasks/:id",
                "stats": "GET /api/tasks/stats",
            },
        },
    }, 200
