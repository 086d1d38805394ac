"""
Blocked date API routes.

Blocking a date moves its scheduled publications in the same request;
the response reports where each one went.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from pubcal.api.deps import get_scheduling_service, raise_for_errors
from pubcal.api.schemas import (
    BlockDateRequest,
    BlockDateResponse,
    BlockedDateResponse,
    DisplacementModel,
)
from pubcal.components.scheduling import SchedulingService

router = APIRouter()


@router.get("", response_model=list[BlockedDateResponse])
def list_blocked_dates(
    start: date | None = Query(None),
    end: date | None = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    rows = service.list_blocked_dates(start, end)
    return [BlockedDateResponse.from_entity(b) for b in rows]


@router.post("", response_model=BlockDateResponse, status_code=201)
def block_date(
    request: BlockDateRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """
    Block a date and reschedule publications on it.

    Publications that cannot be moved within the horizon are listed in
    `unresolved` with a matching warning; the block itself still applies.
    """
    result, errors = service.block_date(request.date, request.reason)
    raise_for_errors(errors)
    if result is None:
        raise HTTPException(status_code=500, detail="Failed to block date")

    return BlockDateResponse(
        blocked_date=BlockedDateResponse.from_entity(result.blocked_date),
        rescheduled_count=result.rescheduled_count,
        rescheduled=[
            DisplacementModel(
                publication_id=d.publication_id,
                from_date=d.from_date,
                to_date=d.to_date,
            )
            for d in result.rescheduled
        ],
        unresolved=list(result.unresolved),
        warnings=[w.to_dict() for w in result.warnings],
    )


@router.delete("/{blocked_date_id}")
def unblock_date(
    blocked_date_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> dict[str, Any]:
    """Remove a block. Nothing is moved back onto the date."""
    removed, errors = service.unblock_date(blocked_date_id)
    raise_for_errors(errors)
    return {
        "success": True,
        "blocked_date_id": blocked_date_id,
        "date": removed.date.isoformat() if removed else None,
    }
