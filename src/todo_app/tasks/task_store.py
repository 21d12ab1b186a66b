# src/todo_app/tasks/task_store.py

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceError, ValidationError
from .task_models import Task, TaskStats, utcnow

logger = logging.getLogger(__name__)


class TaskStore:
    """
    JSON-file task store.

    The whole list lives in memory and is the source of truth while the process runs:
    - the file is read once, in __init__
    - every successful mutation rewrites the whole file (write-through)
    - a missing/corrupt/unreadable file starts an empty list and becomes the new baseline

    No locking: concurrent writers can lose updates.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._tasks: list[Task] = []
        self._last_id = 0
        self._load()
        logger.info("TaskStore ready path=%s total=%s", self._path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _load(self) -> None:
        try:
            raw = json.loads(self._path.read_text("utf-8"))
            if not isinstance(raw, list):
                raise ValueError("tasks file must contain a JSON array")
        except FileNotFoundError:
            logger.info("Tasks file %s not found; starting empty.", self._path)
            self._write_baseline()
            return
        except (OSError, ValueError):
            logger.exception("Failed to read tasks from %s; starting empty.", self._path)
            self._write_baseline()
            return

        seen: set[int] = set()
        for item in raw:
            try:
                task = Task.from_dict(item)
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed task record in %s: %r", self._path, item)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s in %s", task.id, self._path)
                continue
            seen.add(task.id)
            self._tasks.append(task)

        self._last_id = max(seen, default=0)

    def _write_baseline(self) -> None:
        self._tasks = []
        try:
            self._save()
        except PersistenceError:
            logger.warning("Could not write empty baseline to %s", self._path)

    def _save(self) -> None:
        payload: list[dict[str, Any]] = [t.to_dict() for t in self._tasks]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            logger.exception("Failed to save tasks to %s", self._path)
            raise PersistenceError("Failed to save tasks") from e

    def _next_id(self) -> int:
        # Time-derived, but never reuses or goes below an issued id.
        now_ms = int(time.time() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return self._last_id

    def _index_of(self, task_id: int) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    @staticmethod
    def _clean_text(text: Any, message: str, type_message: str | None = None) -> str:
        if not isinstance(text, str):
            raise ValidationError(type_message or message)
        cleaned = text.strip()
        if not cleaned:
            raise ValidationError(message)
        return cleaned

    # ---- public API ----

    def list_all(self) -> list[Task]:
        return [replace(t) for t in self._tasks]

    def get_by_id(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return replace(self._tasks[idx]) if idx >= 0 else None

    def count_tasks(self) -> int:
        return len(self._tasks)

    def count_stats(self) -> TaskStats:
        return TaskStats.from_tasks(self._tasks)

    def create(self, text: Any) -> Task:
        cleaned = self._clean_text(text, "Task text is required and cannot be empty")

        now = utcnow()
        task = Task(
            id=self._next_id(),
            text=cleaned,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self._tasks.append(task)
        self._save()
        logger.debug("Task created id=%s", task.id)
        return replace(task)

    def update(self, task_id: int, *, text: Any = None, completed: Any = None) -> Task | None:
        """
        Partial update. None means "not provided" for both fields.

        Returns None when no task has task_id; the store is left untouched in that case.
        """
        idx = self._index_of(task_id)
        if idx < 0:
            return None

        current = self._tasks[idx]
        new_text = current.text
        if text is not None:
            new_text = self._clean_text(
                text, "Task text cannot be empty", "Task text must be a string"
            )

        new_completed = current.completed
        if completed is not None:
            if not isinstance(completed, bool):
                raise ValidationError("Task completed flag must be a boolean")
            new_completed = completed

        now = utcnow()
        if now <= current.updated_at:
            now = current.updated_at + timedelta(microseconds=1)

        updated = replace(current, text=new_text, completed=new_completed, updated_at=now)
        self._tasks[idx] = updated
        self._save()
        logger.debug("Task updated id=%s completed=%s", task_id, new_completed)
        return replace(updated)

    def delete(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx < 0:
            return False

        del self._tasks[idx]
        self._save()
        logger.debug("Task deleted id=%s", task_id)
        return True
