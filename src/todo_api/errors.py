"""Error kinds raised by the storage and repository layers."""
from __future__ import annotations


class TodoApiError(Exception):
    """Base class for todo service errors."""


class StorageError(TodoApiError):
    """The backing store could not be read, parsed or written."""


class TodoNotFoundError(TodoApiError):
    """No todo in the collection carries the requested id."""

    def __init__(self, todo_id: object) -> None:
        super().__init__(f"Todo {todo_id!r} not found")
        self.todo_id = todo_id
