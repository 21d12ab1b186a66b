# src/todo_app/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_ts(ts: datetime) -> str:
    """ISO-8601 in UTC with a 'Z' suffix, microsecond precision."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_ts(raw: Any) -> datetime:
    """
    Parse a stored/wire timestamp.

    Accepts 'Z' or '+00:00' suffixes and millisecond precision. Naive values are taken as UTC.
    """
    if isinstance(raw, datetime):
        ts = raw
    elif isinstance(raw, str) and raw.strip():
        s = raw.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        ts = datetime.fromisoformat(s)
    else:
        raise ValueError(f"invalid timestamp: {raw!r}")

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class TaskFilter(StrEnum):
    """Completion filter used by the client view."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        return cls(raw.strip().lower())


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Wire/file representation (camelCase keys, ISO timestamps)."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": format_ts(self.created_at),
            "updatedAt": format_ts(self.updated_at),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """Raises KeyError/TypeError/ValueError on malformed records."""
        task_id = raw["id"]
        if isinstance(task_id, bool) or not isinstance(task_id, (int, float)):
            raise TypeError(f"task id must be a number, got {task_id!r}")
        if isinstance(task_id, float) and not task_id.is_integer():
            raise ValueError(f"task id must be a whole number, got {task_id!r}")
        text = raw["text"]
        if not isinstance(text, str):
            raise TypeError("task text must be a string")
        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise TypeError(f"task completed flag must be a boolean, got {completed!r}")

        created_at = parse_ts(raw["createdAt"])
        updated_at = parse_ts(raw.get("updatedAt") or raw["createdAt"])
        return cls(
            id=int(task_id),
            text=text,
            completed=completed,
            created_at=created_at,
            updated_at=max(updated_at, created_at),
        )


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> TaskStats:
        items = list(tasks)
        total = len(items)
        completed = sum(1 for t in items if t.completed)
        return cls(total=total, completed=completed, pending=total - completed)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaskStats:
        return cls(
            total=int(raw.get("total", 0)),
            completed=int(raw.get("completed", 0)),
            pending=int(raw.get("pending", 0)),
        )

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "completed": self.completed, "pending": self.pending}
