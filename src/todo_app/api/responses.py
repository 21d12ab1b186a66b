# src/todo_app/api/responses.py

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def envelope(
    status: int,
    *,
    success: bool = True,
    data: Any = None,
    message: str | None = None,
    error: str | None = None,
) -> tuple[Response, int]:
    """
    Uniform response body: {success, data?, message?, error?}.

    Keys without a value are left out; an empty list is still a value.
    """
    body: dict[str, Any] = {"success": success}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    if error is not None:
        body["error"] = error
    return jsonify(body), status


def fail(status: int, error: str) -> tuple[Response, int]:
    return envelope(status, success=False, error=error)
