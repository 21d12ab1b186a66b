# src/todo_app/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (server and console client).
- Nothing required at import time; every key has a local-friendly default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

ENV_PREFIX = "TODO"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3001",
]


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    from dotenv import load_dotenv

    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    version: str
    log_level: str
    environment: str

    # ---- HTTP server ----
    host: str
    port: int
    cors_origins: List[str]

    # ---- Console client ----
    api_url: str
    health_interval_seconds: float
    request_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TodoApp")
        version = _env(_k("VERSION"), "1.0.0")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        environment = (_first_env(_k("ENV"), "APP_ENV", default="development") or "development")
        environment = environment.strip().lower()

        host = _env(_k("HOST"), "localhost").strip() or "localhost"
        port = _env_int(_k("PORT"), 3001)
        cors_origins = _env_list(_k("CORS_ORIGINS"), DEFAULT_CORS_ORIGINS)

        api_url = _env(_k("API_URL"), f"http://{host}:{port}").rstrip("/")
        health_interval_seconds = _env_float(_k("HEALTH_INTERVAL_SECONDS"), 30.0)
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")

        return Settings(
            app_name=app_name,
            version=version,
            log_level=log_level,
            environment=environment,
            host=host,
            port=port,
            cors_origins=cors_origins,
            api_url=api_url,
            health_interval_seconds=health_interval_seconds,
            request_timeout_seconds=request_timeout_seconds,
            data_dir=data_dir,
            tasks_path=tasks_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
