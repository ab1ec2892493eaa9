from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..core.date_index import build_index
from ..core.dday import d_day, format_period
from ..core.month_grid import build_month_view, weekday_labels
from ..core.timetable import HOURS, build_timetable
from ..core.weekdays import WeekStart, ordered_weekdays
from ..repositories import ScheduleRepository, TodoRepository, get_schedule_repository, get_todo_repository
from ..schemas import MonthViewOut, ScheduleOut, TaskCardOut, TimetableViewOut
from ..settings import Settings, get_settings
from ..view_state import Tab, ViewState

# Shown on task cards for todos without content.
EMPTY_CONTENT = "No content."

router = APIRouter(
    prefix="/api/v1/views",
    tags=["views"],
)


# PUBLIC_INTERFACE
@router.get(
    "/calendar",
    response_model=MonthViewOut,
    summary="Calendar Month",
    description=(
        "Month grid of the requested month (default: current month) where each day "
        "carries the number and titles of the todos whose range touches it."
    ),
    responses={422: {"description": "A stored todo spans too many days"}},
)
def calendar_view(
    year: Optional[int] = Query(None, ge=1, le=9999, description="Year; defaults to the current year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="1-based month; defaults to the current month"),
    week_start: Optional[WeekStart] = Query(None, description="'sunday' or 'monday'"),
    owner_id: Optional[int] = Query(None, description="Only todos of this owner"),
    repo: TodoRepository = Depends(get_todo_repository),
    settings: Settings = Depends(get_settings),
) -> MonthViewOut:
    """
    Build the calendar month view.
    """
    today = date.today()
    state = ViewState(
        current_date=date(year or today.year, month or today.month, 1),
        active_tab=Tab.CALENDAR,
        calendar_week_start=week_start or settings.calendar_week_start,
    )
    index = build_index(repo.all(owner_id), settings.max_span_days)
    weeks = build_month_view(state.current_date, index, today, state.calendar_week_start)
    return MonthViewOut(
        year=state.current_date.year,
        month=state.current_date.month,
        week_start=state.calendar_week_start,
        weekday_labels=weekday_labels(state.calendar_week_start),
        weeks=weeks,  # type: ignore[arg-type]
    )


# PUBLIC_INTERFACE
@router.get(
    "/tasks",
    response_model=List[TaskCardOut],
    summary="Task Cards",
    description="Todos as task cards with their period and D-Day label relative to today.",
)
def task_cards(
    owner_id: Optional[int] = Query(None, description="Only todos of this owner"),
    repo: TodoRepository = Depends(get_todo_repository),
) -> List[TaskCardOut]:
    """
    D-Day labels are computed against the date at request time.
    """
    today = date.today()
    return [
        TaskCardOut(
            id=todo["id"],
            title=todo["title"],
            period=format_period(todo["start_date"], todo["end_date"]),
            content=todo["content"] or EMPTY_CONTENT,
            d_day=d_day(todo["end_date"], today),
            completed=todo["completed"],
        )
        for todo in repo.all(owner_id)
    ]


# PUBLIC_INTERFACE
@router.get(
    "/timetable",
    response_model=TimetableViewOut,
    summary="Weekly Timetable",
    description=(
        "The 12 hour x 7 weekday timetable. Overlapping schedules resolve to the "
        "first one created; block spans are reported on start cells only."
    ),
)
def timetable_view(
    week_start: Optional[WeekStart] = Query(None, description="'monday' or 'sunday'"),
    owner_id: Optional[int] = Query(None, description="Only schedules of this owner"),
    repo: ScheduleRepository = Depends(get_schedule_repository),
    settings: Settings = Depends(get_settings),
) -> TimetableViewOut:
    """
    Build the timetable view.
    """
    start = week_start or settings.timetable_week_start
    rows = build_timetable(repo.all(owner_id=owner_id), start)
    return TimetableViewOut(
        week_start=start,
        weekdays=ordered_weekdays(start),
        hours=HOURS,
        rows=[
            [
                {
                    **cell,
                    "schedule": ScheduleOut(**cell["schedule"]) if cell["schedule"] else None,
                }
                for cell in row
            ]
            for row in rows
        ],  # type: ignore[misc]
    )
