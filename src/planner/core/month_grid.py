from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, date, timedelta
from typing import List, Mapping, Optional, TypedDict

from .date_index import DayAggregate
from .datekey import date_key
from .weekdays import Weekday, WeekStart, ordered_weekdays

MonthGrid = List[List[Optional[int]]]


# PUBLIC_INTERFACE
class MonthCell(TypedDict):
    """One rendered calendar cell. Padding cells have ``day`` None and no data."""

    day: Optional[int]
    date_key: Optional[str]
    weekday: Weekday
    count: int
    titles: List[str]
    is_today: bool


def days_in_month(year: int, month: int) -> int:
    """Last day of ``month`` (1-based) in ``year``."""
    return calendar.monthrange(year, month)[1]


def first_weekday_index(year: int, month: int, week_start: WeekStart = WeekStart.SUNDAY) -> int:
    """Column (0..6) of the 1st of the month under ``week_start``."""
    return (date(year, month, 1).weekday() - week_start.offset) % 7


# PUBLIC_INTERFACE
def build_month_grid(view_date: date, week_start: WeekStart = WeekStart.SUNDAY) -> MonthGrid:
    """
    Lay out the month containing ``view_date`` as weeks of seven cells.

    Leading None cells pad up to the weekday of the 1st, days 1..N follow, and
    trailing None cells fill the final week. The cell count is always a
    multiple of 7.
    """
    year, month = view_date.year, view_date.month

    cells: List[Optional[int]] = [None] * first_weekday_index(year, month, week_start)
    cells.extend(range(1, days_in_month(year, month) + 1))

    remainder = len(cells) % 7
    if remainder:
        cells.extend([None] * (7 - remainder))

    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


# PUBLIC_INTERFACE
def shift_month(view_date: date, step: int) -> date:
    """
    Move ``view_date`` by ``step`` months (-1 for prev, +1 for next).

    Year and month change; the day of month is kept. A day the target month
    does not have rolls forward into the month after it, e.g. Jan 31 + 1
    month is Mar 3 in a non-leap year.

    Navigation stops at the ends of the supported calendar: moving before
    year 1 gives ``date.min`` and moving past year 9999 gives ``date.max``.
    """
    ordinal = view_date.year * 12 + (view_date.month - 1) + step
    year, month_index = divmod(ordinal, 12)
    if year < MINYEAR:
        return date.min
    if year > MAXYEAR:
        return date.max
    return date(year, month_index + 1, 1) + timedelta(days=view_date.day - 1)


# PUBLIC_INTERFACE
def weekday_labels(week_start: WeekStart) -> List[str]:
    """Column header tokens in display order."""
    return [w.value for w in ordered_weekdays(week_start)]


# PUBLIC_INTERFACE
def build_month_view(
    view_date: date,
    index: Mapping[str, DayAggregate],
    today: Optional[date] = None,
    week_start: WeekStart = WeekStart.SUNDAY,
) -> List[List[MonthCell]]:
    """
    Join the month grid with a date index.

    Each real cell is looked up by its date key, so a day reached through the
    grid and the same day parsed from a todo land on one entry.
    """
    current = today if today is not None else date.today()
    columns = ordered_weekdays(week_start)
    month_index = view_date.month - 1

    weeks: List[List[MonthCell]] = []
    for week in build_month_grid(view_date, week_start):
        row: List[MonthCell] = []
        for column, day in enumerate(week):
            if day is None:
                row.append(
                    {
                        "day": None,
                        "date_key": None,
                        "weekday": columns[column],
                        "count": 0,
                        "titles": [],
                        "is_today": False,
                    }
                )
                continue

            key = date_key(view_date.year, month_index, day)
            info: Optional[DayAggregate] = index.get(key)
            row.append(
                {
                    "day": day,
                    "date_key": key,
                    "weekday": columns[column],
                    "count": info["count"] if info else 0,
                    "titles": list(info["titles"]) if info else [],
                    "is_today": (
                        current.year == view_date.year
                        and current.month == view_date.month
                        and current.day == day
                    ),
                }
            )
        weeks.append(row)
    return weeks
