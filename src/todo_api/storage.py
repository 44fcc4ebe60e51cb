from __future__ import annotations

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .errors import StorageError
from .models import TodoCollection, TodoEntity
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _is_todo_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# PUBLIC_INTERFACE
class TodoStorage(ABC):
    """
    Storage contract for the todo collection. The collection is always read
    and written as a whole; implementations do not keep per-record state.
    """

    name: str = "abstract"

    @abstractmethod
    def ensure_initialized(self) -> None:
        """Create an empty collection if none exists yet. Raise StorageError on failure."""

    @abstractmethod
    def load_all(self) -> TodoCollection:
        """Return the full collection in stored order. Raise StorageError on failure."""

    @abstractmethod
    def save_all(self, todos: TodoCollection) -> None:
        """Replace the stored collection with `todos`. Raise StorageError on failure."""


class JsonFileStorage(TodoStorage):
    """
    Persists the collection as one pretty-printed JSON array in a single file.

    Every save rewrites the whole file. There is no locking and no atomic
    rename, so concurrent writers can lose updates and a crash mid-write can
    leave a truncated file.
    """

    name = "file"

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def ensure_initialized(self) -> None:
        if os.path.exists(self._path):
            return
        try:
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump([], f)
        except OSError as e:
            raise StorageError(f"Cannot create data file {self._path}") from e
        logger.info("Created empty todo data file at %s", self._path)

    def load_all(self) -> TodoCollection:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"Cannot read data file {self._path}") from e
        except ValueError as e:
            raise StorageError(f"Data file {self._path} is not valid JSON") from e
        if not isinstance(data, list):
            raise StorageError(f"Data file {self._path} does not hold a JSON array")
        for position, item in enumerate(data):
            if not isinstance(item, dict) or not _is_todo_id(item.get("id")):
                raise StorageError(
                    f"Data file {self._path} holds an invalid todo at position {position}"
                )
        return data

    def save_all(self, todos: TodoCollection) -> None:
        try:
            payload = json.dumps(todos, indent=2, ensure_ascii=False)
            with open(self._path, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write data file {self._path}") from e
        logger.debug("Wrote %d todos to %s", len(todos), self._path)


class InMemoryStorage(TodoStorage):
    """
    Thread-safe process-local storage suitable for testing. Callers always
    receive and hand over copies, mirroring the load/save cycle of the file
    backend.
    """

    name = "memory"

    def __init__(self, todos: Optional[TodoCollection] = None) -> None:
        self._lock = RLock()
        self._items: Optional[List[TodoEntity]] = (
            copy.deepcopy(todos) if todos is not None else None
        )

    def ensure_initialized(self) -> None:
        with self._lock:
            if self._items is None:
                self._items = []

    def load_all(self) -> TodoCollection:
        with self._lock:
            if self._items is None:
                raise StorageError("In-memory storage used before initialization")
            return copy.deepcopy(self._items)

    def save_all(self, todos: TodoCollection) -> None:
        with self._lock:
            self._items = copy.deepcopy(todos)


@lru_cache(maxsize=1)
def _shared_memory_storage() -> InMemoryStorage:
    storage = InMemoryStorage()
    storage.ensure_initialized()
    return storage


# PUBLIC_INTERFACE
def get_storage(settings: Optional[Settings] = None) -> TodoStorage:
    """
    Return the storage backend selected by settings.
    - file: JsonFileStorage over TODOS_DATA_FILE
    - memory: one InMemoryStorage shared by the whole process
    """
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return _shared_memory_storage()
    return JsonFileStorage(settings.data_file)
