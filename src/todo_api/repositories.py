from __future__ import annotations

import logging
from typing import Optional

from .errors import TodoNotFoundError
from .models import TodoCollection, TodoEntity
from .schemas import TodoCreate, TodoUpdate
from .storage import TodoStorage, get_storage
from .utils import next_todo_id, utc_timestamp

logger = logging.getLogger(__name__)


def _find_index(todos: TodoCollection, todo_id: Optional[int]) -> int:
    """Position of the first todo with `todo_id`, or -1."""
    if todo_id is None:
        return -1
    for i, todo in enumerate(todos):
        if todo.get("id") == todo_id:
            return i
    return -1


# PUBLIC_INTERFACE
class TodoRepository:
    """
    CRUD operations over the todo collection.

    Each call loads the full collection from storage; mutating calls write the
    full collection back before returning. Nothing is cached between calls.
    StorageError from the backend propagates unchanged.
    """

    def __init__(self, storage: TodoStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> TodoStorage:
        return self._storage

    def list_all(self) -> TodoCollection:
        return self._storage.load_all()

    def get(self, todo_id: Optional[int]) -> TodoEntity:
        """Return the todo with `todo_id` or raise TodoNotFoundError."""
        todos = self._storage.load_all()
        index = _find_index(todos, todo_id)
        if index == -1:
            raise TodoNotFoundError(todo_id)
        return todos[index]

    def create(self, data: TodoCreate) -> TodoEntity:
        todos = self._storage.load_all()
        entity: TodoEntity = {
            "id": next_todo_id(todos),
            "title": data.title,
            "description": data.description or "",
            "completed": False,
            "createdAt": utc_timestamp(),
        }
        if entity["title"] is None:
            del entity["title"]  # type: ignore[misc]
        todos.append(entity)
        self._storage.save_all(todos)
        logger.info("Created todo %d", entity["id"])
        return entity

    def update(self, todo_id: Optional[int], data: TodoUpdate) -> TodoEntity:
        """
        Merge the provided fields into an existing todo. The id and creation
        timestamp of the stored record always win.
        """
        todos = self._storage.load_all()
        index = _find_index(todos, todo_id)
        if index == -1:
            raise TodoNotFoundError(todo_id)

        existing = todos[index]
        updated: TodoEntity = {**existing, **data.changes()}  # type: ignore[typeddict-item]
        updated["id"] = existing["id"]
        if "createdAt" in existing:
            updated["createdAt"] = existing["createdAt"]

        todos[index] = updated
        self._storage.save_all(todos)
        logger.info("Updated todo %d", updated["id"])
        return updated

    def delete(self, todo_id: Optional[int]) -> None:
        todos = self._storage.load_all()
        index = _find_index(todos, todo_id)
        if index == -1:
            raise TodoNotFoundError(todo_id)
        removed = todos.pop(index)
        self._storage.save_all(todos)
        logger.info("Deleted todo %d", removed["id"])


# PUBLIC_INTERFACE
def get_repository() -> TodoRepository:
    """
    FastAPI dependency returning a repository over the configured storage.
    Settings are read per request so the backing file can be switched through
    the environment.
    """
    return TodoRepository(get_storage())
