from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..core.date_index import span_days
from ..core.datekey import parse_calendar_date
from ..core.errors import SpanTooLargeError
from ..repositories import ListQuery, SORT_FIELDS, TodoRepository, get_todo_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate
from ..settings import Settings, get_settings
from ..utils import pagination_envelope, resolve_owner

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


class PaginationEnvelope(BaseModel):
    """
    Envelope for paginated list responses.
    """
    items: List[TodoOut] = Field(..., description="List of Todo items")
    total: int = Field(..., description="Total number of items matching the query")
    limit: int = Field(..., description="Limit applied to the query")
    offset: int = Field(..., description="Offset applied to the query")


def _check_span(todo_id: Optional[int], start_date: str, end_date: str, settings: Settings) -> None:
    """
    Refuse ranges the calendar index would not expand.
    """
    start = parse_calendar_date(start_date)
    end = parse_calendar_date(end_date)
    if start is None or end is None:
        return
    days = span_days(start, end)
    if days > settings.max_span_days:
        raise SpanTooLargeError(todo_id, days, settings.max_span_days)


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new date-ranged Todo and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error or range too large"},
    },
)
def create_todo(
    payload: TodoCreate,
    repo: TodoRepository = Depends(get_todo_repository),
    settings: Settings = Depends(get_settings),
) -> TodoOut:
    """
    Create a new Todo.
    """
    _check_span(None, payload.start_date, payload.end_date, settings)
    created = repo.create(payload, resolve_owner(payload.user_id, settings))
    logger.info("Created todo %s for owner %s", created["id"], created["owner_id"])
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=PaginationEnvelope,
    summary="List Todos",
    description=(
        "List todos with optional filters and pagination.\n\n"
        "Query parameters:\n"
        "- limit: max number of items to return (0..1000)\n"
        "- offset: number of items to skip (>=0)\n"
        "- completed: filter by completion status\n"
        "- owner_id: filter by owner\n"
        "- q: search query for title/content (substring match)\n"
        "- sort: created_at, updated_at, start_date or end_date, '-' prefix for descending\n"
        "- order: asc or desc (if provided, it overrides the direction in sort)"
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Invalid query parameters"},
    },
)
def list_todos(
    limit: int = Query(50, ge=0, le=1000, description="Maximum number of items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    owner_id: Optional[int] = Query(None, description="Filter by owner id"),
    q: Optional[str] = Query(None, description="Search text for title/content"),
    sort: Optional[str] = Query("-created_at", description="Sort field, '-' prefix for descending"),
    order: Optional[str] = Query(None, description="Override sort direction: 'asc' or 'desc'"),
    repo: TodoRepository = Depends(get_todo_repository),
) -> PaginationEnvelope:
    """
    List todos with pagination and filters.
    """
    normalized_sort = (sort or "-created_at").strip().lower()
    field = normalized_sort.lstrip("-")
    if field not in SORT_FIELDS:
        field, normalized_sort = "created_at", "-created_at"
    if order:
        ord_norm = order.strip().lower()
        if ord_norm not in {"asc", "desc"}:
            raise HTTPException(status_code=400, detail="order must be 'asc' or 'desc'")
        normalized_sort = f"-{field}" if ord_norm == "desc" else field

    query = ListQuery(
        limit=limit,
        offset=offset,
        completed=completed,
        owner_id=owner_id,
        search=q.strip() if q else None,
        sort=normalized_sort,
    )
    items, total = repo.list(query)
    envelope = pagination_envelope(
        items=[TodoOut(**it) for it in items],
        total=total,
        limit=limit,
        offset=offset,
    )
    return PaginationEnvelope(**envelope)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: int, repo: TodoRepository = Depends(get_todo_repository)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    item = repo.get(todo_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return TodoOut(**item)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Partially update fields of a Todo item. Switching 'completed' on records "
        "completed_at; switching it off clears it."
    ),
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        422: {"description": "Validation error or range too large"},
    },
)
def patch_todo(
    todo_id: int,
    payload: TodoUpdate,
    repo: TodoRepository = Depends(get_todo_repository),
    settings: Settings = Depends(get_settings),
) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    current = repo.get(todo_id)
    if not current:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    _check_span(
        todo_id,
        payload.start_date or current["start_date"],
        payload.end_date or current["end_date"],
        settings,
    )
    updated = repo.update(todo_id, payload)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(get_todo_repository)) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    logger.info("Deleted todo %s", todo_id)
    return None
