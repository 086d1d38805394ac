"""
Calendar component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from pubcal.core.entities import PublicationStatus
from pubcal.core.errors import SchedulingError

# --- Read Models ---


@dataclass(frozen=True)
class CalendarEntry:
    """One publication placed on a calendar day."""

    publication_id: int
    manuscript_id: int
    manuscript_title: str | None
    market: str
    status: PublicationStatus


@dataclass(frozen=True)
class CalendarDay:
    """A calendar date with its capacity and entries."""

    date: date
    blocked: bool
    block_reason: str | None
    scheduled_count: int
    # Zero on blocked dates
    remaining_capacity: int
    entries: tuple[CalendarEntry, ...] = ()


@dataclass(frozen=True)
class StatusCounts:
    """Publication counts by status."""

    total: int = 0
    pending: int = 0
    scheduled: int = 0
    published: int = 0


@dataclass(frozen=True)
class PublicationStats:
    """Totals and per-market breakdown."""

    totals: StatusCounts
    by_market: dict[str, StatusCounts] = field(default_factory=dict)


# --- Input Models ---


@dataclass(frozen=True)
class GetCalendarInput:
    """Input for an inclusive date range."""

    start: date
    end: date


@dataclass(frozen=True)
class GetMonthInput:
    """Input for one calendar month."""

    year: int
    month: int


@dataclass(frozen=True)
class PublicationStatsInput:
    """Input for publication statistics."""


# --- Output Models ---


@dataclass(frozen=True)
class CalendarOutput:
    """Output for calendar queries."""

    days: list[CalendarDay]
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PublicationStatsOutput:
    """Output for statistics query."""

    stats: PublicationStats
