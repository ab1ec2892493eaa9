from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, TypedDict

from .datekey import date_key_for, parse_calendar_date
from .errors import SpanTooLargeError

logger = logging.getLogger(__name__)

# Roughly ten years of days.
DEFAULT_MAX_SPAN_DAYS = 3660


# PUBLIC_INTERFACE
class DayAggregate(TypedDict):
    """Todos touching one calendar day: how many, and their titles in input order."""

    count: int
    titles: List[str]


DateIndex = Dict[str, DayAggregate]


# PUBLIC_INTERFACE
def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    for offset in range(span_days(start, end)):
        yield start + timedelta(days=offset)


# PUBLIC_INTERFACE
def span_days(start: date, end: date) -> int:
    """Number of days in the inclusive range; 0 when ``start`` is after ``end``."""
    return max((end - start).days + 1, 0)


# PUBLIC_INTERFACE
def build_index(
    todos: Iterable[Mapping[str, Any]],
    max_span_days: Optional[int] = DEFAULT_MAX_SPAN_DAYS,
) -> DateIndex:
    """
    Expand each todo's [start_date, end_date] range into per-day aggregates.

    Todos whose start or end date cannot be parsed are skipped. Days touched by
    no todo have no entry. The result is rebuilt from scratch on every call.

    Args:
        todos: Todo records exposing ``title``, ``start_date`` and ``end_date``
            (``id`` is used for diagnostics only).
        max_span_days: Largest inclusive span a single todo may cover, or None
            to disable the guard.

    Raises:
        SpanTooLargeError: a todo covers more than ``max_span_days`` days.
    """
    index: DateIndex = {}

    for todo in todos:
        start = parse_calendar_date(todo.get("start_date"))
        end = parse_calendar_date(todo.get("end_date"))
        if start is None or end is None:
            logger.debug(
                "Skipping todo %s with unparsable range %r..%r",
                todo.get("id"),
                todo.get("start_date"),
                todo.get("end_date"),
            )
            continue

        days = span_days(start, end)
        if max_span_days is not None and days > max_span_days:
            logger.warning(
                "Todo %s spans %d days (limit %d)", todo.get("id"), days, max_span_days
            )
            raise SpanTooLargeError(todo.get("id"), days, max_span_days)

        title = todo.get("title", "")
        for day in iter_days(start, end):
            bucket = index.setdefault(date_key_for(day), {"count": 0, "titles": []})
            bucket["count"] += 1
            bucket["titles"].append(title)

    return index
