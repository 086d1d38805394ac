"""
Domain entities for the publication calendar.

- Manuscript: external owner of publications (read-only here)
- Publication: one manuscript x market publication event
- BlockedDate: a calendar date excluded from scheduling

Invariants:
- at most `daily_capacity` scheduled publications per date
- no scheduled publication sits on a blocked date
- scheduled_date writes are >= today; published_date is immutable
- BlockedDate.date is unique
- scheduled_date set iff status in {scheduled, published};
      published_date and kdp_url only when status == published
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Literal

__all__ = [
    "BlockedDate",
    "Manuscript",
    "Publication",
    "PublicationStatus",
    "PUBLICATION_STATUSES",
    "utc_now",
]


PublicationStatus = Literal["pending", "scheduled", "published"]

PUBLICATION_STATUSES: tuple[PublicationStatus, ...] = ("pending", "scheduled", "published")


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Manuscript:
    """Manuscript reference. Only existence and title are consumed."""

    id: int
    title: str


@dataclass(frozen=False)
class Publication:
    """
    Publication event for one manuscript on one market.

    State machine:
    - (no row) -> scheduled -> published
    - scheduled -> scheduled (reschedule)
    - scheduled|published -> (deleted)
    A materialized `pending` row carries no dates.
    """

    manuscript_id: int
    market: str
    status: PublicationStatus = "pending"
    scheduled_date: date | None = None
    published_date: date | None = None
    kdp_url: str | None = None
    notes: str | None = None
    # Store-assigned; ascending ids are the stable processing order
    id: int | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def holds_slot(self) -> bool:
        """Whether this row counts against daily capacity."""
        return self.status == "scheduled" and self.scheduled_date is not None


@dataclass(frozen=True)
class BlockedDate:
    """A date on which nothing may be scheduled."""

    date: date
    reason: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=utc_now)
