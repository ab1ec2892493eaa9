from __future__ import annotations

from typing import Optional


class PlannerError(Exception):
    """Base class for errors raised by the planner core."""


# PUBLIC_INTERFACE
class SpanTooLargeError(PlannerError):
    """
    Raised when a todo's inclusive date range covers more days than the
    configured maximum, so expanding it into per-day buckets is refused.
    """

    def __init__(self, todo_id: Optional[int], span_days: int, max_span_days: int) -> None:
        self.todo_id = todo_id
        self.span_days = span_days
        self.max_span_days = max_span_days
        super().__init__(
            f"todo {todo_id} spans {span_days} days; the maximum is {max_span_days}"
        )
