# tests/test_api.py

from __future__ import annotations

from pathlib import Path

import pytest
from flask.testing import FlaskClient

from todo_app.api.app import create_app
from todo_app.core.errors import PersistenceError
from todo_app.tasks.task_store import TaskStore

from .conftest import make_settings


def _create(client: FlaskClient, text: str) -> dict:
    resp = client.post("/api/tasks", json={"text": text})
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_create_then_get_by_id(client: FlaskClient) -> None:
    resp = client.post("/api/tasks", json={"text": "Buy milk"})
    body = resp.get_json()

    assert resp.status_code == 201
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    assert body["data"]["completed"] is False
    assert body["data"]["createdAt"] == body["data"]["updatedAt"]

    task_id = body["data"]["id"]
    got = client.get(f"/api/tasks/{task_id}")
    assert got.status_code == 200
    assert got.get_json()["data"]["text"] == "Buy milk"


def test_complete_task_advances_updated_at(client: FlaskClient) -> None:
    created = _create(client, "Write tests")

    resp = client.put(f"/api/tasks/{created['id']}", json={"completed": True})
    data = resp.get_json()["data"]

    assert resp.status_code == 200
    assert data["completed"] is True
    assert data["text"] == "Write tests"
    assert data["createdAt"] == created["createdAt"]
    assert data["updatedAt"] != data["createdAt"]


def test_delete_unknown_task_is_404(client: FlaskClient) -> None:
    resp = client.delete("/api/tasks/999999")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "Task not found"}


def test_create_without_text_is_400(client: FlaskClient) -> None:
    resp = client.post("/api/tasks", json={})
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "Task text is required"}


def test_create_with_non_json_body_is_400(client: FlaskClient) -> None:
    resp = client.post("/api/tasks", data="text=hello", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Task text is required"


def test_create_with_blank_text_reports_validation_message(client: FlaskClient) -> None:
    resp = client.post("/api/tasks", json={"text": "    "})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Task text is required and cannot be empty"


@pytest.mark.parametrize(
    ("method", "kwargs"),
    [
        ("get", {}),
        ("put", {"json": {"completed": True}}),
        ("delete", {}),
    ],
)
@pytest.mark.parametrize("raw_id", ["abc", "12abc", "1_000", "+5", "\u0661\u0662\u0663", "1.5"])
def test_non_integer_id_is_400(
    client: FlaskClient, method: str, kwargs: dict, raw_id: str
) -> None:
    resp = getattr(client, method)(f"/api/tasks/{raw_id}", **kwargs)
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "Invalid task ID"}


def test_update_with_empty_text_is_400(client: FlaskClient) -> None:
    created = _create(client, "Plan trip")

    resp = client.put(f"/api/tasks/{created['id']}", json={"text": ""})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Task text cannot be empty"
    assert client.get(f"/api/tasks/{created['id']}").get_json()["data"]["text"] == "Plan trip"


def test_existing_id_written_with_underscore_is_400(client: FlaskClient) -> None:
    created = _create(client, "Exact ids only")
    raw = str(created["id"])

    resp = client.get(f"/api/tasks/{raw[:3]}_{raw[3:]}")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid task ID"


def test_update_with_non_string_text_is_400(client: FlaskClient) -> None:
    created = _create(client, "Typed text")

    resp = client.put(f"/api/tasks/{created['id']}", json={"text": 5})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Task text must be a string"


def test_update_unknown_task_is_404(client: FlaskClient) -> None:
    resp = client.put("/api/tasks/123", json={"completed": True})
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Task not found"


def test_get_unknown_task_is_404(client: FlaskClient) -> None:
    resp = client.get("/api/tasks/42")
    assert resp.status_code == 404


def test_delete_existing_task(client: FlaskClient) -> None:
    created = _create(client, "Throw away")

    resp = client.delete(f"/api/tasks/{created['id']}")

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Task deleted successfully"}
    assert client.get(f"/api/tasks/{created['id']}").status_code == 404


def test_list_and_stats(client: FlaskClient) -> None:
    empty = client.get("/api/tasks").get_json()
    assert empty["data"] == []
    assert empty["message"] == "Retrieved 0 tasks"

    a = _create(client, "a")
    _create(client, "b")
    client.put(f"/api/tasks/{a['id']}", json={"completed": True})

    listed = client.get("/api/tasks").get_json()
    assert [t["text"] for t in listed["data"]] == ["a", "b"]
    assert listed["message"] == "Retrieved 2 tasks"

    stats = client.get("/api/tasks/stats")
    assert stats.status_code == 200
    assert stats.get_json()["data"] == {"total": 2, "completed": 1, "pending": 1}


def test_health_and_index(client: FlaskClient) -> None:
    health = client.get("/health")
    body = health.get_json()
    assert health.status_code == 200
    assert body["success"] is True
    assert body["version"] == "1.0.0"
    assert body["timestamp"].endswith("Z")

    index = client.get("/").get_json()
    assert index["endpoints"]["tasks"]["stats"] == "GET /api/tasks/stats"


def test_unknown_route_uses_envelope(client: FlaskClient) -> None:
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "Route GET /api/nothing-here not found"}


def test_wrong_method_keeps_status(client: FlaskClient) -> None:
    resp = client.patch("/api/tasks/1", json={})
    assert resp.status_code == 405
    assert resp.get_json()["success"] is False


def test_cors_headers_only_for_allowed_origins(client: FlaskClient) -> None:
    allowed = client.get("/api/tasks", headers={"Origin": "http://localhost:3000"})
    assert allowed.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert allowed.headers["Access-Control-Allow-Credentials"] == "true"

    other = client.get("/api/tasks", headers={"Origin": "http://evil.example"})
    assert "Access-Control-Allow-Origin" not in other.headers


class _BrokenStore:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def list_all(self):
        raise self.exc

    def count_stats(self):
        raise self.exc

    def create(self, text):
        raise self.exc


@pytest.mark.parametrize("production", [True, False])
def test_unexpected_error_is_500(tmp_path: Path, production: bool) -> None:
    settings = make_settings(tmp_path, is_production=production)
    client = create_app(_BrokenStore(RuntimeError("kaboom")), settings).test_client()

    for path in ("/api/tasks", "/api/tasks/stats"):
        resp = client.get(path)
        assert resp.status_code == 500
        expected = "Internal server error" if production else "kaboom"
        assert resp.get_json() == {"success": False, "error": expected}


@pytest.mark.parametrize("production", [True, False])
def test_persistence_error_is_500(tmp_path: Path, production: bool) -> None:
    settings = make_settings(tmp_path, is_production=production)
    client = create_app(_BrokenStore(PersistenceError("Failed to save tasks")), settings).test_client()

    resp = client.post("/api/tasks", json={"text": "x"})

    assert resp.status_code == 500
    expected = "Internal server error" if production else "Failed to save tasks"
    assert resp.get_json()["error"] == expected


def test_tasks_survive_app_restart(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    first = create_app(TaskStore(settings.tasks_path), settings).test_client()
    created = _create(first, "persist me")

    second = create_app(TaskStore(settings.tasks_path), settings).test_client()
    got = second.get(f"/api/tasks/{created['id']}").get_json()["data"]

    assert got == created
