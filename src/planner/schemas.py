from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .core.datekey import parse_calendar_date
from .core.timetable import FIRST_HOUR, LAST_HOUR
from .core.weekdays import Weekday, WeekStart

# Incoming calendar dates may be a date, a datetime or an ISO8601 string
CalendarDateInput = Union[date, datetime, str]


def _normalize_calendar_date(value: Optional[CalendarDateInput]) -> Optional[str]:
    """
    Normalize a start/end date to its 'YYYY-MM-DD' form.
    - None passes through (only meaningful for partial updates).
    - date/datetime/ISO string are reduced to the calendar day.
    """
    if value is None:
        return None
    parsed = parse_calendar_date(value)
    if parsed is None:
        raise ValueError(
            "Invalid date format. Use an ISO8601 date such as '2025-01-31'."
        )
    return parsed.isoformat()


def _clean_title(v: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError("title length must be between 1 and 200 characters")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": 1,
                "title": "Algorithms report",
                "content": "Chapter 3 exercises",
                "start_date": "2025-01-30",
                "end_date": "2025-02-02",
            }
        }
    )

    user_id: Optional[int] = Field(default=None, description="Owner id; the configured default user when omitted")
    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, description="Optional body text")
    start_date: str = Field(..., description="First day of the todo (ISO8601 date)")
    end_date: str = Field(..., description="Last day of the todo, inclusive (ISO8601 date)")
    completed: bool = Field(default=False, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _clean_title(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Optional[CalendarDateInput]) -> Optional[str]:
        """
        Normalize start/end dates from str/date/datetime to 'YYYY-MM-DD'.
        """
        return _normalize_calendar_date(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"completed": True}}
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item", min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, description="Optional body text")
    start_date: Optional[str] = Field(default=None, description="First day of the todo (ISO8601 date)")
    end_date: Optional[str] = Field(default=None, description="Last day of the todo, inclusive (ISO8601 date)")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        If title is provided, strip whitespace and enforce 1..200 length.
        """
        if v is None:
            return v
        return _clean_title(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Optional[CalendarDateInput]) -> Optional[str]:
        return _normalize_calendar_date(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    id: int = Field(..., description="Unique identifier of the todo item")
    owner_id: int = Field(..., description="Id of the owning user")
    title: str = Field(..., description="Short title for the todo item")
    content: Optional[str] = Field(default=None, description="Optional body text")
    start_date: str = Field(..., description="First day of the todo")
    end_date: str = Field(..., description="Last day of the todo, inclusive")
    completed: bool = Field(..., description="Completion status flag")
    completed_at: Optional[datetime] = Field(default=None, description="When the todo was completed")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class ScheduleCreate(BaseModel):
    """
    Schema for creating a single weekly schedule entry.
    The hours form the half-open interval [start_time, end_time) within 9..20.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "weekday": "MON",
                "start_time": 9,
                "end_time": 11,
                "title": "Data structures",
                "content": "Room 301",
                "color": "#4f8ef7",
            }
        }
    )

    user_id: Optional[int] = Field(default=None, description="Owner id; the configured default user when omitted")
    weekday: Weekday = Field(..., description="Weekday token (MON..SUN)")
    start_time: int = Field(..., ge=FIRST_HOUR, le=LAST_HOUR, description="Start hour, inclusive")
    end_time: int = Field(..., ge=FIRST_HOUR, le=LAST_HOUR, description="End hour, exclusive")
    title: str = Field(..., description="Schedule title", min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, description="Optional details")
    color: str = Field(default="", description="Opaque display color token")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @model_validator(mode="after")
    def check_hours(self) -> "ScheduleCreate":
        """
        Enforce start_time < end_time.
        """
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


# PUBLIC_INTERFACE
class ScheduleOut(BaseModel):
    """
    Schema returned by the API for a schedule entry.
    """

    id: int = Field(..., description="Unique identifier of the schedule")
    owner_id: int = Field(..., description="Id of the owning user")
    weekday: Weekday = Field(..., description="Weekday token")
    start_time: int = Field(..., description="Start hour, inclusive")
    end_time: int = Field(..., description="End hour, exclusive")
    title: str = Field(..., description="Schedule title")
    content: Optional[str] = Field(default=None, description="Optional details")
    color: str = Field(..., description="Opaque display color token")
    created_at: datetime = Field(..., description="Creation timestamp")


class SlotIn(BaseModel):
    """Start/end hours chosen for one weekday of a schedule draft."""

    start_time: Optional[int] = Field(default=None, description="Start hour")
    end_time: Optional[int] = Field(default=None, description="End hour")


# PUBLIC_INTERFACE
class ScheduleDraftIn(BaseModel):
    """
    A multi-weekday schedule form submission. Ranges are checked by the
    schedule form rules, not here, so that every reason can be reported.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Operating systems",
                "color": "#f5a623",
                "slots": {"MON": {"start_time": 9, "end_time": 11}, "WED": {"start_time": 13, "end_time": 15}},
            }
        }
    )

    user_id: Optional[int] = Field(default=None, description="Owner id; the configured default user when omitted")
    title: str = Field(default="", description="Schedule title")
    content: Optional[str] = Field(default=None, description="Optional details")
    color: str = Field(default="", description="Opaque display color token")
    slots: Dict[Weekday, SlotIn] = Field(default_factory=dict, description="Selected weekdays and their hours")


class MonthCellOut(BaseModel):
    day: Optional[int] = Field(default=None, description="Day of month; null on padding cells")
    date_key: Optional[str] = Field(default=None, description="YYYY-MM-DD key of the day")
    weekday: Weekday
    count: int = Field(..., description="Number of todos touching the day")
    titles: List[str] = Field(default_factory=list, description="Titles of those todos, in list order")
    is_today: bool


# PUBLIC_INTERFACE
class MonthViewOut(BaseModel):
    """Calendar month grid joined with the per-day todo index."""

    year: int
    month: int = Field(..., description="1-based month")
    week_start: WeekStart
    weekday_labels: List[str]
    weeks: List[List[MonthCellOut]]


# PUBLIC_INTERFACE
class TaskCardOut(BaseModel):
    """A todo rendered as a task card with its D-Day label."""

    id: int
    title: str
    period: str = Field(..., description="'start ~ end' label")
    content: str = Field(..., description="Body text or the empty-content placeholder")
    d_day: str = Field(..., description="D-n, D-Day, D+n or 'Invalid Date'")
    completed: bool


class TimetableCellOut(BaseModel):
    weekday: Weekday
    hour: int
    schedule: Optional[ScheduleOut] = None
    is_start: bool
    span: int = Field(..., description="Block height in slots on start cells, else 0")


# PUBLIC_INTERFACE
class TimetableViewOut(BaseModel):
    """The 12 hour x 7 weekday timetable."""

    week_start: WeekStart
    weekdays: List[Weekday]
    hours: List[int]
    rows: List[List[TimetableCellOut]]
