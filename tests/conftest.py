# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from flask import Flask
from flask.testing import FlaskClient

from todo_app.api.app import create_app
from todo_app.tasks.task_store import TaskStore


def make_settings(tmp_path: Path, **overrides) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_app and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    values = dict(
        app_name="TodoApp",
        version="1.0.0",
        environment="development",
        is_production=False,
        cors_origins=["http://localhost:3000"],
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        api_url="http://testserver",
        health_interval_seconds=0.01,
        request_timeout_seconds=5.0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    return make_settings(tmp_path)


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real JSON-file store in a per-test tmp dir."""
    return TaskStore(settings.tasks_path)


@pytest.fixture()
def app(store: TaskStore, settings: SimpleNamespace) -> Flask:
    return create_app(store, settings)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
