from __future__ import annotations

from typing import List, Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo record exactly as it is persisted in the JSON document.

    Fields:
    - id: Unique integer identifier, assigned on creation and never changed
    - title: Title as supplied on creation; the key is absent when none was given
    - description: Detailed description, '' when not supplied (null in files written by older versions)
    - completed: Boolean completion flag, False on creation
    - createdAt: ISO8601 UTC creation timestamp, never changed
    """

    id: int
    title: Optional[str]
    description: Optional[str]
    completed: bool
    createdAt: str


# The whole collection, in insertion order.
TodoCollection = List[TodoEntity]
