from __future__ import annotations

import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional, Tuple

from .core.weekdays import Weekday
from .models import ScheduleEntity, TodoEntity
from .repositories import (
    ListQuery,
    ScheduleRepository,
    TodoRepository,
    completion_changes,
    split_sort,
)
from .schemas import ScheduleCreate, TodoCreate, TodoUpdate


@dataclass(frozen=True)
class _TodoCols:
    table: str = "todos"
    id: str = "id"
    owner_id: str = "owner_id"
    title: str = "title"
    content: str = "content"
    start_date: str = "start_date"
    end_date: str = "end_date"
    completed: str = "completed"
    completed_at: str = "completed_at"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


@dataclass(frozen=True)
class _ScheduleCols:
    table: str = "schedules"
    id: str = "id"
    owner_id: str = "owner_id"
    weekday: str = "weekday"
    start_time: str = "start_time"
    end_time: str = "end_time"
    title: str = "title"
    content: str = "content"
    color: str = "color"
    created_at: str = "created_at"


_T = _TodoCols()
_S = _ScheduleCols()


def _parse_dt(s: Optional[str]) -> Optional[datetime]:
    if s is None:
        return None
    return datetime.fromisoformat(s)


class _SQLiteBase(ABC):
    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    @abstractmethod
    def _init_db(self) -> None:
        """Create the tables and indexes this repository needs."""


class SQLiteTodoRepository(_SQLiteBase, TodoRepository):
    """
    Lightweight SQLite repository implementing the TodoRepository interface.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_T.table} (
                    {_T.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_T.owner_id} INTEGER NOT NULL,
                    {_T.title} TEXT NOT NULL,
                    {_T.content} TEXT NULL,
                    {_T.start_date} TEXT NOT NULL,
                    {_T.end_date} TEXT NOT NULL,
                    {_T.completed} INTEGER NOT NULL DEFAULT 0,
                    {_T.completed_at} TEXT NULL,
                    {_T.created_at} TEXT NOT NULL,
                    {_T.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_owner ON {_T.table}({_T.owner_id})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_completed ON {_T.table}({_T.completed})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": int(row[_T.id]),
            "owner_id": int(row[_T.owner_id]),
            "title": str(row[_T.title]),
            "content": row[_T.content],
            "start_date": str(row[_T.start_date]),
            "end_date": str(row[_T.end_date]),
            "completed": bool(row[_T.completed]),
            "completed_at": _parse_dt(row[_T.completed_at]),
            "created_at": _parse_dt(row[_T.created_at]),  # type: ignore
            "updated_at": _parse_dt(row[_T.updated_at]),  # type: ignore
        }

    def _select(self, conn: sqlite3.Connection, todo_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (todo_id,)).fetchone()

    def create(self, data: TodoCreate, owner_id: int) -> TodoEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_T.table} ({_T.owner_id}, {_T.title}, {_T.content}, {_T.start_date},
                    {_T.end_date}, {_T.completed}, {_T.completed_at}, {_T.created_at}, {_T.updated_at})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner_id,
                    data.title,
                    data.content,
                    data.start_date,
                    data.end_date,
                    1 if data.completed else 0,
                    now if data.completed else None,
                    now,
                    now,
                ),
            )
            row = self._select(conn, int(cur.lastrowid))  # type: ignore[arg-type]
            assert row is not None
            return self._row_to_entity(row)

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = self._select(conn, todo_id)
            return self._row_to_entity(row) if row else None

    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = self._select(conn, todo_id)
            if not row:
                return None
            current = self._row_to_entity(row)
            now = datetime.now()

            title = data.title if data.title is not None else current["title"]
            content = data.content if "content" in data.model_fields_set else current["content"]
            start_date = data.start_date if data.start_date is not None else current["start_date"]
            end_date = data.end_date if data.end_date is not None else current["end_date"]
            changes = completion_changes(current, data, now)
            completed = changes.get("completed", current["completed"])
            completed_at = changes.get("completed_at", current["completed_at"])
            conn.execute(
                f"""
                UPDATE {_T.table}
                SET {_T.title} = ?, {_T.content} = ?, {_T.start_date} = ?, {_T.end_date} = ?,
                    {_T.completed} = ?, {_T.completed_at} = ?, {_T.updated_at} = ?
                WHERE {_T.id} = ?
                """,
                (
                    title,
                    content,
                    start_date,
                    end_date,
                    1 if completed else 0,
                    completed_at.isoformat() if completed_at else None,
                    now.isoformat(),
                    todo_id,
                ),
            )
            row2 = self._select(conn, todo_id)
            assert row2 is not None
            return self._row_to_entity(row2)

    def delete(self, todo_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.id} = ?", (todo_id,))
            return cur.rowcount > 0

    def list(self, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        q = query or ListQuery()
        clauses = []
        params: list = []

        if q.completed is not None:
            clauses.append(f"{_T.completed} = ?")
            params.append(1 if q.completed else 0)

        if q.owner_id is not None:
            clauses.append(f"{_T.owner_id} = ?")
            params.append(q.owner_id)

        if q.search:
            # Substring search on title and content
            clauses.append(f"({_T.title} LIKE ? OR {_T.content} LIKE ?)")
            like = f"%{q.search}%"
            params.extend([like, like])

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        field, reverse = split_sort(q.sort)
        direction = "DESC" if reverse else "ASC"
        order_sql = f"ORDER BY {field} {direction}, {_T.id} {direction}"

        with self._conn() as conn:
            count_row = conn.execute(
                f"SELECT COUNT(*) as cnt FROM {_T.table} {where_sql}", params
            ).fetchone()
            total = int(count_row["cnt"]) if count_row else 0

            rows = conn.execute(
                f"""
                SELECT * FROM {_T.table}
                {where_sql}
                {order_sql}
                LIMIT ? OFFSET ?
                """,
                [*params, max(q.limit, 0), max(q.offset, 0)],
            ).fetchall()
            return [self._row_to_entity(r) for r in rows], total

    def all(self, owner_id: Optional[int] = None) -> List[TodoEntity]:
        with self._conn() as conn:
            if owner_id is None:
                rows = conn.execute(f"SELECT * FROM {_T.table} ORDER BY {_T.id}").fetchall()
            else:
                rows = conn.execute(
                    f"SELECT * FROM {_T.table} WHERE {_T.owner_id} = ? ORDER BY {_T.id}", (owner_id,)
                ).fetchall()
            return [self._row_to_entity(r) for r in rows]


class SQLiteScheduleRepository(_SQLiteBase, ScheduleRepository):
    """
    SQLite-backed schedule store.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_S.table} (
                    {_S.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_S.owner_id} INTEGER NOT NULL,
                    {_S.weekday} TEXT NOT NULL,
                    {_S.start_time} INTEGER NOT NULL,
                    {_S.end_time} INTEGER NOT NULL,
                    {_S.title} TEXT NOT NULL,
                    {_S.content} TEXT NULL,
                    {_S.color} TEXT NOT NULL DEFAULT '',
                    {_S.created_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_S.table}_owner_weekday ON {_S.table}({_S.owner_id}, {_S.weekday})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> ScheduleEntity:
        return {
            "id": int(row[_S.id]),
            "owner_id": int(row[_S.owner_id]),
            "weekday": Weekday(row[_S.weekday]),
            "start_time": int(row[_S.start_time]),
            "end_time": int(row[_S.end_time]),
            "title": str(row[_S.title]),
            "content": row[_S.content],
            "color": str(row[_S.color]),
            "created_at": _parse_dt(row[_S.created_at]),  # type: ignore
        }

    def create(self, data: ScheduleCreate, owner_id: int) -> ScheduleEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_S.table} ({_S.owner_id}, {_S.weekday}, {_S.start_time}, {_S.end_time},
                    {_S.title}, {_S.content}, {_S.color}, {_S.created_at})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    owner_id,
                    data.weekday.value,
                    data.start_time,
                    data.end_time,
                    data.title,
                    data.content,
                    data.color,
                    datetime.now().isoformat(),
                ),
            )
            row = conn.execute(
                f"SELECT * FROM {_S.table} WHERE {_S.id} = ?", (cur.lastrowid,)
            ).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def get(self, schedule_id: int) -> Optional[ScheduleEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_S.table} WHERE {_S.id} = ?", (schedule_id,)).fetchone()
            return self._row_to_entity(row) if row else None

    def delete(self, schedule_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_S.table} WHERE {_S.id} = ?", (schedule_id,))
            return cur.rowcount > 0

    def all(self, owner_id: Optional[int] = None, weekday: Optional[Weekday] = None) -> List[ScheduleEntity]:
        clauses = []
        params: list = []
        if owner_id is not None:
            clauses.append(f"{_S.owner_id} = ?")
            params.append(owner_id)
        if weekday is not None:
            clauses.append(f"{_S.weekday} = ?")
            params.append(Weekday(weekday).value)
        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_S.table} {where_sql} ORDER BY {_S.id}", params
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]
