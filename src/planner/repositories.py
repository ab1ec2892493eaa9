from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .core.weekdays import Weekday
from .models import ScheduleEntity, TodoEntity
from .schemas import ScheduleCreate, TodoCreate, TodoUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)

SORT_FIELDS = {"created_at", "updated_at", "start_date", "end_date"}


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing todos.
    """
    limit: int = 50
    offset: int = 0
    completed: Optional[bool] = None
    owner_id: Optional[int] = None
    search: Optional[str] = None
    sort: str = "-created_at"  # allowed: [-]created_at, [-]updated_at, [-]start_date, [-]end_date


def split_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """Return (field, descending) for a sort key, falling back to -created_at."""
    key = sort.strip().lower() if sort else "-created_at"
    reverse = key.startswith("-")
    field = key[1:] if reverse else key
    if field not in SORT_FIELDS:
        return "created_at", True
    return field, reverse


def completion_changes(current: Dict[str, Any], data: TodoUpdate, now: datetime) -> Dict[str, Any]:
    """
    Fields to write when ``data`` may toggle completion: completed_at is set
    when a todo becomes completed and cleared when it is reopened.
    """
    if data.completed is None or data.completed == current["completed"]:
        return {}
    return {"completed": data.completed, "completed_at": now if data.completed else None}


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, data: TodoCreate, owner_id: int) -> TodoEntity:
        """Create and return a new TodoEntity owned by owner_id."""

    @abstractmethod
    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        """Update fields of an existing TodoEntity. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        """
        Return a slice of TodoEntities and total count matching filters.
        - Supports limit/offset
        - Filter by completed and owner
        - Substring search across title and content (case-insensitive)
        - Sorting by created_at/updated_at/start_date/end_date (asc/desc)
        """

    @abstractmethod
    def all(self, owner_id: Optional[int] = None) -> List[TodoEntity]:
        """Return every todo (optionally of one owner) in creation order."""


# PUBLIC_INTERFACE
class ScheduleRepository(ABC):
    """Abstract repository contract for schedule storage backends."""

    @abstractmethod
    def create(self, data: ScheduleCreate, owner_id: int) -> ScheduleEntity:
        """Create and return a new ScheduleEntity owned by owner_id."""

    @abstractmethod
    def get(self, schedule_id: int) -> Optional[ScheduleEntity]:
        """Return a ScheduleEntity by id, or None if not found."""

    @abstractmethod
    def delete(self, schedule_id: int) -> bool:
        """Delete a ScheduleEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def all(self, owner_id: Optional[int] = None, weekday: Optional[Weekday] = None) -> List[ScheduleEntity]:
        """Return schedules in creation order, optionally filtered by owner and weekday."""


class _Counter:
    def __init__(self) -> None:
        self._lock = RLock()
        self._next_id = 1

    def allocate(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._ids = _Counter()

    def _now(self) -> datetime:
        return datetime.now()

    def create(self, data: TodoCreate, owner_id: int) -> TodoEntity:
        now = self._now()
        entity: TodoEntity = {
            "id": self._ids.allocate(),
            "owner_id": owner_id,
            "title": data.title,
            "content": data.content,
            "start_date": data.start_date,
            "end_date": data.end_date,
            "completed": data.completed,
            "completed_at": now if data.completed else None,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()  # type: ignore[return-value]

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None

            now = self._now()
            # Update only provided fields
            updated = existing.copy()
            if data.title is not None:
                updated["title"] = data.title
            if "content" in data.model_fields_set:
                # Respect explicit nulling of content
                updated["content"] = data.content
            if data.start_date is not None:
                updated["start_date"] = data.start_date
            if data.end_date is not None:
                updated["end_date"] = data.end_date
            updated.update(completion_changes(existing, data, now))  # type: ignore[typeddict-item]
            updated["updated_at"] = now

            self._items[todo_id] = updated  # type: ignore[assignment]
            return updated.copy()  # type: ignore[return-value]

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None

    def list(self, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        q = query or ListQuery()
        with self._lock:
            items: Iterable[TodoEntity] = list(self._items.values())

            # Filtering
            if q.completed is not None:
                items = [t for t in items if t["completed"] == q.completed]

            if q.owner_id is not None:
                items = [t for t in items if t["owner_id"] == q.owner_id]

            if q.search:
                s = q.search.lower()
                def matches(t: TodoEntity) -> bool:
                    title_ok = s in (t["title"] or "").lower()
                    content_ok = s in t["content"].lower() if t["content"] else False
                    return title_ok or content_ok
                items = [t for t in items if matches(t)]

            items = list(items)
            total = len(items)

            # Sorting; ties keep creation order
            field, reverse = split_sort(q.sort)
            items_sorted = sorted(items, key=lambda t: (t[field], t["id"]), reverse=reverse)  # type: ignore[literal-required]

            # Pagination
            start = max(q.offset, 0)
            end = start + max(q.limit, 0)
            page = items_sorted[start:end]

            # Return copies to avoid external mutation
            return [t.copy() for t in page], total  # type: ignore[misc]

    def all(self, owner_id: Optional[int] = None) -> List[TodoEntity]:
        with self._lock:
            return [
                t.copy()  # type: ignore[misc]
                for t in self._items.values()
                if owner_id is None or t["owner_id"] == owner_id
            ]


class InMemoryScheduleRepository(ScheduleRepository):
    """
    Thread-safe in-memory schedule store.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, ScheduleEntity] = {}
        self._ids = _Counter()

    def create(self, data: ScheduleCreate, owner_id: int) -> ScheduleEntity:
        entity: ScheduleEntity = {
            "id": self._ids.allocate(),
            "owner_id": owner_id,
            "weekday": data.weekday,
            "start_time": data.start_time,
            "end_time": data.end_time,
            "title": data.title,
            "content": data.content,
            "color": data.color,
            "created_at": datetime.now(),
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()  # type: ignore[return-value]

    def get(self, schedule_id: int) -> Optional[ScheduleEntity]:
        with self._lock:
            item = self._items.get(schedule_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def delete(self, schedule_id: int) -> bool:
        with self._lock:
            return self._items.pop(schedule_id, None) is not None

    def all(self, owner_id: Optional[int] = None, weekday: Optional[Weekday] = None) -> List[ScheduleEntity]:
        with self._lock:
            return [
                s.copy()  # type: ignore[misc]
                for s in self._items.values()
                if (owner_id is None or s["owner_id"] == owner_id)
                and (weekday is None or s["weekday"] == weekday)
            ]


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_todo_repository() -> TodoRepository:
    """
    Return the configured todo repository, created once per process.
    - memory: InMemoryTodoRepository
    - sqlite: SQLiteTodoRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteTodoRepository

        logger.info("Using sqlite todo storage at %s", settings.sqlite_db_path)
        return SQLiteTodoRepository(settings.sqlite_db_path)
    return InMemoryTodoRepository()


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_schedule_repository() -> ScheduleRepository:
    """
    Return the configured schedule repository, created once per process.
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteScheduleRepository

        logger.info("Using sqlite schedule storage at %s", settings.sqlite_db_path)
        return SQLiteScheduleRepository(settings.sqlite_db_path)
    return InMemoryScheduleRepository()
