from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional


# PUBLIC_INTERFACE
def next_todo_id(todos: Iterable[Mapping]) -> int:
    """
    Return the id for a new todo: highest existing id plus one, or 1 for an
    empty collection. Ids of deleted todos below the current maximum are not
    reused, but emptying the collection restarts numbering at 1.
    """
    ids = [t["id"] for t in todos]
    return max(ids) + 1 if ids else 1


# PUBLIC_INTERFACE
def utc_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a timestamp as ISO8601 UTC with millisecond precision and a 'Z'
    suffix, e.g. '2025-01-25T10:15:30.123Z'.
    """
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    current = current.astimezone(timezone.utc)
    return current.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# PUBLIC_INTERFACE
def parse_todo_id(raw: str) -> Optional[int]:
    """
    Parse a path segment as a todo id. Returns None for anything that is not a
    base-10 integer so the lookup simply matches nothing. Stricter than a
    leading-digits parse: "12abc" and "1.5" are rejected, not read as 12 and 1.
    """
    value = raw.strip()
    if not value or not value.lstrip("+-").isdigit():
        return None
    try:
        return int(value)
    except ValueError:
        return None
