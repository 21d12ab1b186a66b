# src/todo_app/core/errors.py

"""
Error kinds shared by the store, the HTTP layer and the console client.

The store raises them; only the API layer turns them into status codes.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for expected application failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TodoError):
    """Caller-supplied data violates a task invariant (e.g. empty text)."""

    status_code = 400


class InvalidIdentifierError(TodoError):
    status_code = 400

    def __init__(self, message: str = "Invalid task ID") -> None:
        super().__init__(message)


class NotFoundError(TodoError):
    status_code = 404

    def __init__(self, message: str = "Task not found") -> None:
        super().__init__(message)


class PersistenceError(TodoError):
    """The store mutated its list but could not write it to disk."""

    status_code = 500


class ApiError(Exception):
    """
    Client-side failure: a non-success envelope or a transport error.

    status_code is None when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
