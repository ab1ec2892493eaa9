from __future__ import annotations

from datetime import date
from typing import Optional

from .datekey import CalendarDateInput, parse_calendar_date

# Label returned when the target date cannot be parsed.
INVALID_DDAY = "Invalid Date"


# PUBLIC_INTERFACE
def d_day(end_date: CalendarDateInput, today: Optional[date] = None) -> str:
    """
    Return the relative-day label of ``end_date`` as seen from ``today``.

    ``today`` defaults to the local date at call time; it is read on every call.

    Returns:
        ``D-n`` when the target is n days ahead, ``D-Day`` on the day itself,
        ``D+n`` when it passed n days ago, or ``INVALID_DDAY`` when the target
        is unparsable.
    """
    target = parse_calendar_date(end_date)
    if target is None:
        return INVALID_DDAY

    current = today if today is not None else date.today()
    diff = (target - current).days

    if diff > 0:
        return f"D-{diff}"
    if diff == 0:
        return "D-Day"
    return f"D+{abs(diff)}"


# PUBLIC_INTERFACE
def format_period(start: str, end: str) -> str:
    """Period label shown on task cards."""
    return f"{start} ~ {end}"
