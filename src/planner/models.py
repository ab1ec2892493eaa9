from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict

from .core.weekdays import Weekday


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A date-ranged todo as held by the storage backends.

    Fields:
    - id: Unique integer identifier
    - owner_id: Id of the user the todo belongs to
    - title: Short title (trimmed on input via schemas)
    - content: Optional body text
    - start_date / end_date: ISO 'YYYY-MM-DD' strings, inclusive range
    - completed: Boolean completion flag
    - completed_at: When completion was last switched on, else None
    - created_at / updated_at: local timestamps
    """

    id: int
    owner_id: int
    title: str
    content: Optional[str]
    start_date: str
    end_date: str
    completed: bool
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class ScheduleEntity(TypedDict):
    """
    A weekly timetable entry covering the hours [start_time, end_time) on one
    weekday.
    """

    id: int
    owner_id: int
    weekday: Weekday
    start_time: int
    end_time: int
    title: str
    content: Optional[str]
    color: str
    created_at: datetime
