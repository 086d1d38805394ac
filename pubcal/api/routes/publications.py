"""
Publication API routes.

Multi-market scheduling, reschedule, publish and delete. Domain errors
come back as `{"detail": {"errors": [...]}}` with the status mapped from
the first error code.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from pubcal.api.deps import (
    get_calendar_service,
    get_lifecycle_service,
    get_scheduling_service,
    raise_for_errors,
)
from pubcal.api.schemas import (
    CreatePendingRequest,
    MarketAssignmentModel,
    MarketFailureModel,
    MarkMarketPublishedRequest,
    MarkPublishedRequest,
    PublicationResponse,
    PublicationStatsResponse,
    RescheduleRequest,
    ScheduleMarketsRequest,
    ScheduleMarketsResponse,
    StatusCountsModel,
)
from pubcal.components.calendar import CalendarService
from pubcal.components.lifecycle import LifecycleService
from pubcal.components.scheduling import SchedulingService

router = APIRouter()


@router.get("", response_model=list[PublicationResponse])
def list_publications(
    manuscript_id: int | None = Query(None),
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    """List publications, optionally for one manuscript."""
    if manuscript_id is None:
        rows = service.list_all()
    else:
        rows = service.list_for_manuscript(manuscript_id)
    return [PublicationResponse.from_entity(p) for p in rows]


@router.post("/schedule", response_model=ScheduleMarketsResponse)
def schedule_markets(
    request: ScheduleMarketsRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Any:
    """
    Schedule a manuscript on several markets.

    Markets without a slot inside the horizon are listed in `failed`;
    the others keep their dates.
    """
    result, errors = service.schedule_markets(
        manuscript_id=request.manuscript_id,
        markets=request.markets,
        start_date=request.start_date,
    )
    raise_for_errors(errors)
    if result is None:
        raise HTTPException(status_code=500, detail="Scheduling produced no result")

    return ScheduleMarketsResponse(
        manuscript_id=result.manuscript_id,
        assigned=[
            MarketAssignmentModel(market=a.market, date=a.date, publication_id=a.publication_id)
            for a in result.assigned
        ],
        failed=[
            MarketFailureModel(market=f.market, code=f.code, message=f.message)
            for f in result.failed
        ],
        skipped=list(result.skipped),
    )


@router.post("/pending", response_model=PublicationResponse, status_code=201)
def create_pending(
    request: CreatePendingRequest,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    """Materialize a pending publication row."""
    publication, errors = service.create_pending(
        request.manuscript_id, request.market, request.notes
    )
    raise_for_errors(errors)
    if publication is None:
        raise HTTPException(status_code=500, detail="Failed to create publication")
    return PublicationResponse.from_entity(publication)


@router.post("/publish", response_model=PublicationResponse)
def mark_market_published(
    request: MarkMarketPublishedRequest,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    """Mark a manuscript published on one market; pending pairs are rejected."""
    publication, errors = service.mark_published_for_market(
        request.manuscript_id, request.market, request.kdp_url
    )
    raise_for_errors(errors)
    return PublicationResponse.from_entity(publication)  # type: ignore[arg-type]


@router.get("/stats", response_model=PublicationStatsResponse)
def publication_stats(
    service: CalendarService = Depends(get_calendar_service),
) -> Any:
    """Counts by status, overall and per market."""
    stats = service.publication_stats()
    return PublicationStatsResponse(
        totals=StatusCountsModel(**vars(stats.totals)),
        by_market={m: StatusCountsModel(**vars(c)) for m, c in stats.by_market.items()},
    )


@router.get("/{publication_id}", response_model=PublicationResponse)
def get_publication(
    publication_id: int,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    publication, errors = service.get(publication_id)
    raise_for_errors(errors)
    return PublicationResponse.from_entity(publication)  # type: ignore[arg-type]


@router.post("/{publication_id}/reschedule", response_model=PublicationResponse)
def reschedule_publication(
    publication_id: int,
    request: RescheduleRequest,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    """Move a scheduled publication to another date."""
    publication, errors = service.reschedule(publication_id, request.new_date)
    raise_for_errors(errors)
    return PublicationResponse.from_entity(publication)  # type: ignore[arg-type]


@router.post("/{publication_id}/publish", response_model=PublicationResponse)
def mark_published(
    publication_id: int,
    request: MarkPublishedRequest,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> Any:
    """Mark a scheduled publication as published today."""
    publication, errors = service.mark_published(publication_id, request.kdp_url)
    raise_for_errors(errors)
    return PublicationResponse.from_entity(publication)  # type: ignore[arg-type]


@router.delete("/{publication_id}")
def delete_publication(
    publication_id: int,
    service: LifecycleService = Depends(get_lifecycle_service),
) -> dict[str, Any]:
    """Delete a publication, freeing its slot."""
    deleted, errors = service.delete(publication_id)
    raise_for_errors(errors)
    return {"success": deleted, "publication_id": publication_id}
