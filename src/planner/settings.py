from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List

from .core.date_index import DEFAULT_MAX_SPAN_DAYS
from .core.weekdays import WeekStart


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/planner.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - DEFAULT_USER_ID: owner id used when a payload does not name one (default: 1)
    - MAX_SPAN_DAYS: largest inclusive day span a todo may cover (default: 3660)
    - CALENDAR_WEEK_START: 'sunday' (default) or 'monday'
    - TIMETABLE_WEEK_START: 'monday' (default) or 'sunday'
    - LOG_LEVEL: standard logging level name (default: INFO)
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    default_user_id: int
    max_span_days: int
    calendar_week_start: WeekStart
    timetable_week_start: WeekStart
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int, minimum: int = 1) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_week_start(value: str, default: WeekStart) -> WeekStart:
    try:
        return WeekStart(value.strip().lower())
    except ValueError:
        return default


def _parse_log_level(value: str) -> str:
    name = value.strip().upper()
    return name if isinstance(logging.getLevelName(name), int) else "INFO"


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/planner.db").strip()

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        default_user_id=_parse_int(_get_env("DEFAULT_USER_ID", "1"), 1),
        max_span_days=_parse_int(_get_env("MAX_SPAN_DAYS", str(DEFAULT_MAX_SPAN_DAYS)), DEFAULT_MAX_SPAN_DAYS),
        calendar_week_start=_parse_week_start(_get_env("CALENDAR_WEEK_START", "sunday"), WeekStart.SUNDAY),
        timetable_week_start=_parse_week_start(_get_env("TIMETABLE_WEEK_START", "monday"), WeekStart.MONDAY),
        log_level=_parse_log_level(_get_env("LOG_LEVEL", "INFO")),
    )
