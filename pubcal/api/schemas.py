from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from pubcal.core.entities import BlockedDate, Publication

# --- Shared Types ---
PublicationStatus = Literal["pending", "scheduled", "published"]


# --- Publications ---
class PublicationResponse(BaseModel):
    id: int
    manuscript_id: int
    market: str
    status: PublicationStatus
    scheduled_date: date | None = None
    published_date: date | None = None
    kdp_url: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, publication: Publication) -> "PublicationResponse":
        return cls(
            id=publication.id or 0,
            manuscript_id=publication.manuscript_id,
            market=publication.market,
            status=publication.status,
            scheduled_date=publication.scheduled_date,
            published_date=publication.published_date,
            kdp_url=publication.kdp_url,
            notes=publication.notes,
            created_at=publication.created_at,
            updated_at=publication.updated_at,
        )


class ScheduleMarketsRequest(BaseModel):
    manuscript_id: int
    markets: list[str] = Field(..., min_length=1)
    start_date: date | None = None


class MarketAssignmentModel(BaseModel):
    market: str
    date: date
    publication_id: int


class MarketFailureModel(BaseModel):
    market: str
    code: str
    message: str


class ScheduleMarketsResponse(BaseModel):
    manuscript_id: int
    assigned: list[MarketAssignmentModel] = []
    failed: list[MarketFailureModel] = []
    skipped: list[str] = []


class CreatePendingRequest(BaseModel):
    manuscript_id: int
    market: str
    notes: str | None = None


class RescheduleRequest(BaseModel):
    new_date: date


class MarkPublishedRequest(BaseModel):
    kdp_url: str | None = Field(None, max_length=2048)


class MarkMarketPublishedRequest(BaseModel):
    manuscript_id: int
    market: str
    kdp_url: str | None = Field(None, max_length=2048)


# --- Blocked Dates ---
class BlockedDateResponse(BaseModel):
    id: int
    date: date
    reason: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, blocked: BlockedDate) -> "BlockedDateResponse":
        return cls(
            id=blocked.id or 0,
            date=blocked.date,
            reason=blocked.reason,
            created_at=blocked.created_at,
        )


class BlockDateRequest(BaseModel):
    date: date
    reason: str | None = Field(None, max_length=500)


class DisplacementModel(BaseModel):
    publication_id: int
    from_date: date
    to_date: date


class BlockDateResponse(BaseModel):
    blocked_date: BlockedDateResponse
    rescheduled_count: int
    rescheduled: list[DisplacementModel] = []
    unresolved: list[int] = []
    warnings: list[dict[str, Any]] = []


# --- Calendar ---
class CalendarEntryModel(BaseModel):
    publication_id: int
    manuscript_id: int
    manuscript_title: str | None = None
    market: str
    status: PublicationStatus


class CalendarDayModel(BaseModel):
    date: date
    blocked: bool
    block_reason: str | None = None
    scheduled_count: int
    remaining_capacity: int
    entries: list[CalendarEntryModel] = []


class CalendarResponse(BaseModel):
    start: date
    end: date
    days: list[CalendarDayModel]


class StatusCountsModel(BaseModel):
    total: int
    pending: int
    scheduled: int
    published: int


class PublicationStatsResponse(BaseModel):
    totals: StatusCountsModel
    by_market: dict[str, StatusCountsModel]
