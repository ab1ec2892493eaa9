from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from ..core.schedule_form import ScheduleDraft, draft_errors, to_schedule_records
from ..core.weekdays import Weekday
from ..repositories import ScheduleRepository, get_schedule_repository
from ..schemas import ScheduleCreate, ScheduleDraftIn, ScheduleOut
from ..settings import Settings, get_settings
from ..utils import resolve_owner

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/schedules",
    tags=["schedules"],
)


def _to_draft(payload: ScheduleDraftIn) -> ScheduleDraft:
    return ScheduleDraft(
        title=payload.title,
        content=payload.content,
        color=payload.color,
        slots={day: (slot.start_time, slot.end_time) for day, slot in payload.slots.items()},
    )


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[ScheduleOut],
    summary="List Schedules",
    description="List schedules in creation order, optionally filtered by owner and weekday.",
)
def list_schedules(
    owner_id: Optional[int] = Query(None, description="Filter by owner id"),
    weekday: Optional[Weekday] = Query(None, description="Filter by weekday token"),
    repo: ScheduleRepository = Depends(get_schedule_repository),
) -> List[ScheduleOut]:
    """
    List schedules.
    """
    return [ScheduleOut(**s) for s in repo.all(owner_id=owner_id, weekday=weekday)]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=ScheduleOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Schedule",
    description="Create one weekly schedule entry with hours 9 <= start_time < end_time <= 20.",
    responses={
        201: {"description": "Schedule created"},
        422: {"description": "Validation error"},
    },
)
def create_schedule(
    payload: ScheduleCreate,
    repo: ScheduleRepository = Depends(get_schedule_repository),
    settings: Settings = Depends(get_settings),
) -> ScheduleOut:
    """
    Create a schedule. Overlaps with existing schedules are not checked.
    """
    created = repo.create(payload, resolve_owner(payload.user_id, settings))
    logger.info("Created schedule %s on %s", created["id"], created["weekday"])
    return ScheduleOut(**created)


# PUBLIC_INTERFACE
@router.post(
    "/batch",
    response_model=List[ScheduleOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create Schedules From Draft",
    description=(
        "Validate a multi-weekday schedule draft and create one independent "
        "schedule per selected weekday."
    ),
    responses={
        201: {"description": "Schedules created"},
        422: {"description": "Draft is not valid"},
    },
)
def create_schedules_from_draft(
    payload: ScheduleDraftIn,
    repo: ScheduleRepository = Depends(get_schedule_repository),
    settings: Settings = Depends(get_settings),
):
    """
    Commit a schedule draft. Nothing is created when the draft is invalid.
    """
    draft = _to_draft(payload)
    errors = draft_errors(draft)
    if errors:
        return JSONResponse(
            status_code=422,
            content={
                "error": "InvalidScheduleDraft",
                "message": "Schedule draft is not valid",
                "detail": errors,
            },
        )

    owner_id = resolve_owner(payload.user_id, settings)
    created = [
        repo.create(ScheduleCreate(**record), owner_id)
        for record in to_schedule_records(draft, owner_id)
    ]
    logger.info("Created %d schedules from draft %r", len(created), draft.title)
    return [ScheduleOut(**s) for s in created]


# PUBLIC_INTERFACE
@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Schedule",
    responses={
        204: {"description": "Schedule deleted"},
        404: {"description": "Schedule not found"},
    },
)
def delete_schedule(schedule_id: int, repo: ScheduleRepository = Depends(get_schedule_repository)) -> None:
    """
    Delete a schedule. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(schedule_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    logger.info("Deleted schedule %s", schedule_id)
    return None
