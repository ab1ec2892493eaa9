"""
Pure calendar/timetable engine.

Everything here is a function of its explicit arguments: todo and schedule
records in, lookup maps and renderable grids out. No I/O and no shared state.
"""

from .datekey import date_key, date_key_for, parse_calendar_date
from .date_index import DEFAULT_MAX_SPAN_DAYS, DayAggregate, build_index, iter_days, span_days
from .dday import INVALID_DDAY, d_day, format_period
from .errors import PlannerError, SpanTooLargeError
from .month_grid import (
    build_month_grid,
    build_month_view,
    days_in_month,
    first_weekday_index,
    shift_month,
    weekday_labels,
)
from .schedule_form import (
    ScheduleDraft,
    TodoDraft,
    draft_errors,
    is_todo_draft_valid,
    is_valid,
    set_slot_field,
    to_schedule_records,
    toggle_weekday,
)
from .timetable import (
    FIRST_HOUR,
    HOURS,
    LAST_HOUR,
    block_span,
    build_slot_map,
    build_timetable,
    is_block_start,
    slot_at,
)
from .weekdays import Weekday, WeekStart, ordered_weekdays

__all__ = [
    "DEFAULT_MAX_SPAN_DAYS",
    "DayAggregate",
    "FIRST_HOUR",
    "HOURS",
    "INVALID_DDAY",
    "LAST_HOUR",
    "PlannerError",
    "ScheduleDraft",
    "SpanTooLargeError",
    "TodoDraft",
    "WeekStart",
    "Weekday",
    "block_span",
    "build_index",
    "build_month_grid",
    "build_month_view",
    "build_slot_map",
    "build_timetable",
    "d_day",
    "date_key",
    "date_key_for",
    "days_in_month",
    "draft_errors",
    "first_weekday_index",
    "format_period",
    "is_block_start",
    "is_todo_draft_valid",
    "is_valid",
    "iter_days",
    "ordered_weekdays",
    "parse_calendar_date",
    "set_slot_field",
    "shift_month",
    "slot_at",
    "span_days",
    "to_schedule_records",
    "toggle_weekday",
    "weekday_labels",
]
