from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

CalendarDateInput = Union[date, datetime, str, None]

# Parsed by hand so the accepted forms do not depend on the interpreter version.
_ISO_DATE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{1,6})?)?(?:Z|[+-]\d{2}:\d{2})?)?",
    re.ASCII,
)


# PUBLIC_INTERFACE
def date_key(year: int, month_index: int, day: int) -> str:
    """
    Build the canonical key of one calendar day.

    Args:
        year: Four digit year.
        month_index: Zero-based month (0 = January).
        day: Day of month.

    Returns:
        A ``YYYY-MM-DD`` string. No range validation is done.
    """
    return f"{year}-{month_index + 1:02d}-{day:02d}"


# PUBLIC_INTERFACE
def date_key_for(value: date) -> str:
    """Key of a ``date`` (or ``datetime``); identical to ``date_key`` of its parts."""
    return date_key(value.year, value.month - 1, value.day)


# PUBLIC_INTERFACE
def parse_calendar_date(value: CalendarDateInput) -> Optional[date]:
    """
    Normalize a date-like value to a local calendar date.

    - ``datetime`` values lose their time-of-day.
    - ``date`` values are returned as-is.
    - Strings must be ``YYYY-MM-DD``, optionally followed by an ISO8601 time
      part (``T`` or space, ``HH:MM[:SS[.ffffff]]``, optional ``Z`` or offset);
      the time is checked for shape and then dropped.
    - Anything else, or an unparsable string, yields None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        match = _ISO_DATE.fullmatch(value.strip())
        if match is None:
            return None
        try:
            return date(int(match["year"]), int(match["month"]), int(match["day"]))
        except ValueError:
            return None

    return None
