"""
Calendar API route.

Either `start` and `end` (inclusive) or `year` and `month` must be given.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from pubcal.api.deps import get_calendar_service, raise_for_errors
from pubcal.api.schemas import CalendarDayModel, CalendarEntryModel, CalendarResponse
from pubcal.components.calendar import CalendarService

router = APIRouter()


@router.get("", response_model=CalendarResponse)
def get_calendar(
    start: date | None = Query(None),
    end: date | None = Query(None),
    year: int | None = Query(None),
    month: int | None = Query(None),
    service: CalendarService = Depends(get_calendar_service),
) -> Any:
    if start is not None and end is not None:
        days, errors = service.get_calendar(start, end)
    elif year is not None and month is not None:
        days, errors = service.get_month(year, month)
    else:
        raise HTTPException(
            status_code=400,
            detail={
                "errors": [
                    {
                        "code": "invalid_range",
                        "message": "Provide start and end, or year and month",
                    }
                ]
            },
        )
    raise_for_errors(errors)

    return CalendarResponse(
        start=days[0].date,
        end=days[-1].date,
        days=[
            CalendarDayModel(
                date=d.date,
                blocked=d.blocked,
                block_reason=d.block_reason,
                scheduled_count=d.scheduled_count,
                remaining_capacity=d.remaining_capacity,
                entries=[
                    CalendarEntryModel(
                        publication_id=e.publication_id,
                        manuscript_id=e.manuscript_id,
                        manuscript_title=e.manuscript_title,
                        market=e.market,
                        status=e.status,
                    )
                    for e in d.entries
                ],
            )
            for d in days
        ],
    )
