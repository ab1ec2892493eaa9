from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .timetable import FIRST_HOUR, LAST_HOUR
from .weekdays import Weekday, WeekStart, ordered_weekdays

DEFAULT_SLOT: Tuple[int, int] = (FIRST_HOUR, FIRST_HOUR + 1)
SLOT_FIELDS = ("start_time", "end_time")

Slot = Tuple[Optional[int], Optional[int]]


# PUBLIC_INTERFACE
@dataclass
class ScheduleDraft:
    """
    In-progress schedule form state.

    ``slots`` holds one (start_time, end_time) pair per selected weekday; a
    weekday that is not a key is not selected.
    """

    title: str = ""
    content: Optional[str] = None
    color: str = ""
    slots: Dict[Weekday, Slot] = field(default_factory=dict)


# PUBLIC_INTERFACE
@dataclass
class TodoDraft:
    """In-progress todo form state."""

    title: str = ""
    content: str = ""
    start_date: str = ""
    end_date: str = ""


# PUBLIC_INTERFACE
def toggle_weekday(draft: ScheduleDraft, weekday: Weekday) -> None:
    """Select ``weekday`` with the default 9-10 slot, or drop it and its slot."""
    if weekday in draft.slots:
        del draft.slots[weekday]
    else:
        draft.slots[weekday] = DEFAULT_SLOT


# PUBLIC_INTERFACE
def set_slot_field(draft: ScheduleDraft, weekday: Weekday, name: str, value: Optional[int]) -> None:
    """
    Replace the start or end hour of one selected weekday.

    Raises:
        KeyError: ``weekday`` is not selected.
        ValueError: ``name`` is not ``start_time`` or ``end_time``.
    """
    if name not in SLOT_FIELDS:
        raise ValueError(f"unknown slot field: {name}")
    start, end = draft.slots[weekday]
    draft.slots[weekday] = (value, end) if name == "start_time" else (start, value)


def _in_range(hour: Optional[int]) -> bool:
    return isinstance(hour, int) and FIRST_HOUR <= hour <= LAST_HOUR


# PUBLIC_INTERFACE
def draft_errors(draft: ScheduleDraft) -> List[str]:
    """Reasons ``draft`` cannot be submitted; empty when it is valid."""
    errors: List[str] = []
    if not (draft.title or "").strip():
        errors.append("title is required")
    if not draft.slots:
        errors.append("select at least one weekday")

    for weekday in ordered_weekdays(WeekStart.MONDAY):
        if weekday not in draft.slots:
            continue
        start, end = draft.slots[weekday]
        if not _in_range(start):
            errors.append(f"{weekday.value}: start_time must be between {FIRST_HOUR} and {LAST_HOUR}")
        if not _in_range(end):
            errors.append(f"{weekday.value}: end_time must be between {FIRST_HOUR} and {LAST_HOUR}")
        if _in_range(start) and _in_range(end) and not start < end:  # type: ignore[operator]
            errors.append(f"{weekday.value}: start_time must be before end_time")
    return errors


# PUBLIC_INTERFACE
def is_valid(draft: ScheduleDraft) -> bool:
    """
    True when the draft may be submitted.

    Overlaps with other schedules, on any weekday, are not checked.
    """
    return not draft_errors(draft)


# PUBLIC_INTERFACE
def to_schedule_records(draft: ScheduleDraft, owner_id: int) -> List[Dict[str, Any]]:
    """
    Expand a draft into one independent schedule payload per selected weekday,
    in Monday-first order.
    """
    records: List[Dict[str, Any]] = []
    for weekday in ordered_weekdays(WeekStart.MONDAY):
        if weekday not in draft.slots:
            continue
        start, end = draft.slots[weekday]
        records.append(
            {
                "weekday": weekday,
                "start_time": start,
                "end_time": end,
                "title": draft.title.strip(),
                "content": draft.content,
                "color": draft.color,
                "owner_id": owner_id,
            }
        )
    return records


# PUBLIC_INTERFACE
def is_todo_draft_valid(draft: TodoDraft) -> bool:
    """Every todo form field must be non-blank."""
    return all(
        (value or "").strip() != ""
        for value in (draft.title, draft.content, draft.start_date, draft.end_date)
    )
