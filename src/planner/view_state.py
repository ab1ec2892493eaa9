from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum

from .core.month_grid import shift_month
from .core.weekdays import WeekStart


# PUBLIC_INTERFACE
class Tab(str, Enum):
    """Top-level views of the planner."""

    TASKS = "tasks"
    TODOS = "todos"
    CALENDAR = "calendar"
    TIMETABLE = "timetable"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class ViewState:
    """
    What the user is looking at: the viewed month, the active tab and the
    week-start convention of each grid.

    Instances are immutable; navigation returns a new state. Values are handed
    to the core functions as explicit arguments.
    """

    current_date: date = field(default_factory=date.today)
    active_tab: Tab = Tab.TASKS
    calendar_week_start: WeekStart = WeekStart.SUNDAY
    timetable_week_start: WeekStart = WeekStart.MONDAY

    def prev_month(self) -> "ViewState":
        return replace(self, current_date=shift_month(self.current_date, -1))

    def next_month(self) -> "ViewState":
        return replace(self, current_date=shift_month(self.current_date, 1))

    def select_tab(self, tab: Tab) -> "ViewState":
        """Switch tabs; unknown values raise ValueError."""
        return replace(self, active_tab=Tab(tab))
