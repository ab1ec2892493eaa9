from __future__ import annotations

from enum import Enum
from typing import List


# PUBLIC_INTERFACE
class Weekday(str, Enum):
    """The seven weekday tokens that cross the service boundary on schedules."""

    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


# PUBLIC_INTERFACE
class WeekStart(str, Enum):
    """
    Week-start convention of a seven-column view.

    The calendar view starts its weeks on Sunday while the timetable starts on
    Monday; every grid builder takes one of these explicitly.
    """

    SUNDAY = "sunday"
    MONDAY = "monday"

    @property
    def offset(self) -> int:
        """``date.weekday()`` value of the first column."""
        return 6 if self is WeekStart.SUNDAY else 0


_MONDAY_FIRST: List[Weekday] = [
    Weekday.MON,
    Weekday.TUE,
    Weekday.WED,
    Weekday.THU,
    Weekday.FRI,
    Weekday.SAT,
    Weekday.SUN,
]


# PUBLIC_INTERFACE
def ordered_weekdays(week_start: WeekStart) -> List[Weekday]:
    """Return the seven weekdays in column order for ``week_start``."""
    start = week_start.offset
    return [_MONDAY_FIRST[(start + i) % 7] for i in range(7)]
