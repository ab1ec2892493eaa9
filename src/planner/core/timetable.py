from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypedDict

from .weekdays import Weekday, WeekStart, ordered_weekdays

FIRST_HOUR = 9
LAST_HOUR = 20
# Displayable rows, 9:00 through 20:00.
HOURS: List[int] = list(range(FIRST_HOUR, LAST_HOUR + 1))

ScheduleRecord = Mapping[str, Any]
SlotMap = Dict[Tuple[Weekday, int], ScheduleRecord]


# PUBLIC_INTERFACE
class TimetableCell(TypedDict):
    """One weekday/hour slot of the timetable grid."""

    weekday: Weekday
    hour: int
    schedule: Optional[ScheduleRecord]
    is_start: bool
    span: int


def _covers(schedule: ScheduleRecord, weekday: Weekday, hour: int) -> bool:
    return (
        schedule["weekday"] == weekday
        and schedule["start_time"] <= hour < schedule["end_time"]
    )


# PUBLIC_INTERFACE
def slot_at(schedules: Iterable[ScheduleRecord], weekday: Weekday, hour: int) -> Optional[ScheduleRecord]:
    """
    Return the schedule occupying ``weekday`` at ``hour``, or None.

    Schedules cover the half-open interval [start_time, end_time). When two
    schedules overlap, the first one in iteration order wins.
    """
    for schedule in schedules:
        if _covers(schedule, weekday, hour):
            return schedule
    return None


# PUBLIC_INTERFACE
def is_block_start(schedule: ScheduleRecord, hour: int) -> bool:
    """True on the hour where a schedule's block is drawn."""
    return schedule["start_time"] == hour


# PUBLIC_INTERFACE
def block_span(schedule: ScheduleRecord) -> int:
    """Height of a schedule's block, in slots."""
    return schedule["end_time"] - schedule["start_time"]


# PUBLIC_INTERFACE
def build_slot_map(schedules: Sequence[ScheduleRecord]) -> SlotMap:
    """
    Precompute the (weekday, hour) -> schedule occupancy map.

    Gives the same answer as ``slot_at`` for every cell, including the
    first-match-wins rule for overlapping schedules.
    """
    slots: SlotMap = {}
    for schedule in schedules:
        weekday = Weekday(schedule["weekday"])
        for hour in range(schedule["start_time"], schedule["end_time"]):
            slots.setdefault((weekday, hour), schedule)
    return slots


# PUBLIC_INTERFACE
def build_timetable(
    schedules: Sequence[ScheduleRecord],
    week_start: WeekStart = WeekStart.MONDAY,
) -> List[List[TimetableCell]]:
    """
    Build the fixed 12x7 timetable grid, one row per hour in ``HOURS``.

    A cell whose hour is the start of its schedule carries the block span;
    the other cells of that block report ``span`` 0 so renderers skip them.
    """
    slots = build_slot_map(schedules)
    columns = ordered_weekdays(week_start)

    rows: List[List[TimetableCell]] = []
    for hour in HOURS:
        row: List[TimetableCell] = []
        for weekday in columns:
            schedule = slots.get((weekday, hour))
            start = schedule is not None and is_block_start(schedule, hour)
            row.append(
                {
                    "weekday": weekday,
                    "hour": hour,
                    "schedule": schedule,
                    "is_start": start,
                    "span": block_span(schedule) if start else 0,
                }
            )
        rows.append(row)
    return rows
