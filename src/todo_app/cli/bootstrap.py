# src/todo_app/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the store and the Flask app for `serve`,
- builds the API client and controller for `console`.
"""

from __future__ import annotations

import logging

from flask import Flask

from ..api.app import create_app
from ..client.api_client import TaskApiClient
from ..client.controller import TaskController
from ..config import get_settings
from ..core.ports import TaskApi
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_task_store(*, settings=None) -> TaskStore:
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)
    return TaskStore(settings.tasks_path)


def create_server_app(*, settings=None, task_store: TaskStore | None = None) -> Flask:
    """
    Build the Flask app around a single TaskStore.

    Keeping settings/store injectable makes the app easier to test and avoids hidden global state.
    """
    if settings is None:
        settings = get_settings()
    if task_store is None:
        task_store = create_task_store(settings=settings)
    return create_app(task_store, settings)


def create_api_client(*, settings=None) -> TaskApiClient:
    if settings is None:
        settings = get_settings()
    logger.info("API client base_url=%s", settings.api_url)
    return TaskApiClient(settings.api_url, timeout=settings.request_timeout_seconds)


def create_controller(api: TaskApi, *, settings=None) -> TaskController:
    if settings is None:
        settings = get_settings()
    return TaskController(api, health_interval_seconds=settings.health_interval_seconds)
