"""
Scheduling component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from pubcal.core.entities import BlockedDate
from pubcal.core.errors import ErrorCode, SchedulingError

# --- Result Models ---


@dataclass(frozen=True)
class MarketAssignment:
    """A market that received a publication date."""

    market: str
    date: date
    publication_id: int


@dataclass(frozen=True)
class MarketFailure:
    """A market that could not be scheduled."""

    market: str
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class ScheduleMarketsResult:
    """Outcome of a multi-market scheduling request (partial success allowed)."""

    manuscript_id: int
    assigned: tuple[MarketAssignment, ...] = ()
    failed: tuple[MarketFailure, ...] = ()
    # Markets already scheduled or published for this manuscript
    skipped: tuple[str, ...] = ()


@dataclass(frozen=True)
class Displacement:
    """A publication moved off a newly blocked date."""

    publication_id: int
    from_date: date
    to_date: date


@dataclass(frozen=True)
class BlockDateResult:
    """Outcome of blocking a date."""

    blocked_date: BlockedDate
    rescheduled: tuple[Displacement, ...] = ()
    unresolved: tuple[int, ...] = ()
    warnings: tuple[SchedulingError, ...] = ()

    @property
    def rescheduled_count(self) -> int:
        return len(self.rescheduled)


# --- Input Models ---


@dataclass(frozen=True)
class ScheduleMarketsInput:
    """Input for scheduling a manuscript on several markets."""

    manuscript_id: int
    markets: tuple[str, ...]
    start_date: date | None = None


@dataclass(frozen=True)
class BlockDateInput:
    """Input for blocking a date."""

    date: date
    reason: str | None = None


@dataclass(frozen=True)
class UnblockDateInput:
    """Input for removing a block."""

    blocked_date_id: int


@dataclass(frozen=True)
class ListBlockedDatesInput:
    """Input for listing blocked dates."""

    start: date | None = None
    end: date | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ScheduleMarketsOutput:
    """Output for schedule markets operation."""

    result: ScheduleMarketsResult | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class BlockDateOutput:
    """Output for block date operation."""

    result: BlockDateResult | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class UnblockDateOutput:
    """Output for unblock date operation."""

    unblocked: BlockedDate | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class BlockedDateListOutput:
    """Output for list blocked dates operation."""

    blocked_dates: list[BlockedDate]
    total: int
