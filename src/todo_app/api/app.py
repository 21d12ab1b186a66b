# src/todo_app/api/app.py

"""
Flask application factory.

The store is created by the caller (cli/bootstrap.py or a test) and injected here;
this module owns the mapping from failures to status codes:
- TodoError subclasses -> their status_code
- HTTP errors (unknown route, wrong method, body too large) -> same status, JSON envelope
- anything else -> 500
"""

from __future__ import annotations

import json
import logging
from typing import Any

from flask import Flask, Response, request
from werkzeug.exceptions import HTTPException, NotFound

from ..config import get_settings
from ..core.errors import PersistenceError, TodoError
from ..core.ports import TaskRepo
from ..tasks.task_models import format_ts, utcnow
from .responses import fail
from .routes import SETTINGS_KEY, STORE_KEY, service_bp, tasks_bp

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 10 * 1024 * 1024
GENERIC_ERROR = "Internal server error"


def create_app(task_store: TaskRepo, settings: Any = None) -> Flask:
    if settings is None:
        settings = get_settings()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES
    app.extensions[STORE_KEY] = task_store
    app.extensions[SETTINGS_KEY] = settings

    app.register_blueprint(tasks_bp)
    app.register_blueprint(service_bp)

    _register_hooks(app, settings)
    _register_error_handlers(app, settings)
    return app


def _register_hooks(app: Flask, settings: Any) -> None:
    allowed_origins = set(getattr(settings, "cors_origins", None) or [])

    @app.before_request
    def log_request() -> None:
        logger.info("[%s] %s %s", format_ts(utcnow()), request.method, request.path)
        body = request.get_json(silent=True)
        if body:
            logger.info("Request body: %s", json.dumps(body, ensure_ascii=False, indent=2))

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.vary.add("Origin")
        return response


def _register_error_handlers(app: Flask, settings: Any) -> None:
    def _server_message(exc: Exception) -> str:
        if getattr(settings, "is_production", False):
            return GENERIC_ERROR
        return str(exc) or GENERIC_ERROR

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        logger.error("Persistence failure on %s %s: %s", request.method, request.path, exc)
        return fail(500, _server_message(exc))

    @app.errorhandler(TodoError)
    def handle_todo_error(exc: TodoError):
        return fail(exc.status_code, exc.message)

    @app.errorhandler(NotFound)
    def handle_unknown_route(exc: NotFound):
        return fail(404, f"Route {request.method} {request.path} not found")

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(exc.code or 500, exc.name)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail(500, _server_message(exc))
