"""
CalendarService - read model for calendar rendering and statistics.

Pure queries: nothing here writes. Publications are placed on their
scheduled_date (published rows keep theirs); pending rows have no date and
only show up in the statistics.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import MAXYEAR, MINYEAR, date, timedelta

from pubcal.components.scheduling import SchedulingService
from pubcal.core.entities import PUBLICATION_STATUSES, Publication
from pubcal.core.errors import SchedulingError
from pubcal.core.ports.db import UnitOfWorkPort

from .models import CalendarDay, CalendarEntry, PublicationStats, StatusCounts

MAX_RANGE_DAYS = 366


def _count(publications: list[Publication]) -> StatusCounts:
    by_status = {status: 0 for status in PUBLICATION_STATUSES}
    for publication in publications:
        by_status[publication.status] += 1
    return StatusCounts(total=len(publications), **by_status)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last date of a month."""
    _, last_day = monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


class CalendarService:
    """Calendar read model over the scheduling engine's store."""

    def __init__(self, scheduling: SchedulingService) -> None:
        self.scheduling = scheduling

    def get_calendar(
        self,
        start: date,
        end: date,
    ) -> tuple[list[CalendarDay], list[SchedulingError]]:
        """
        Every date in [start, end] with its blocked flag, capacity and entries.

        Returns:
            Tuple of (days, errors). `invalid_range` if end < start or the
            range is longer than MAX_RANGE_DAYS.
        """
        if end < start:
            return [], [
                SchedulingError(
                    code="invalid_range",
                    message=f"End {end.isoformat()} is before start {start.isoformat()}",
                )
            ]
        length = (end - start).days + 1
        if length > MAX_RANGE_DAYS:
            return [], [
                SchedulingError(
                    code="invalid_range",
                    message=f"Range of {length} days exceeds {MAX_RANGE_DAYS}",
                )
            ]

        capacity = self.scheduling.config.daily_capacity

        def work(uow: UnitOfWorkPort) -> tuple[list[CalendarDay], list[SchedulingError]]:
            publications = uow.publications.list_in_range(start, end)
            blocked = {b.date: b for b in uow.blocked_dates.list_in_range(start, end)}
            titles = uow.manuscripts.get_titles([p.manuscript_id for p in publications])

            by_day: dict[date, list[Publication]] = {}
            for publication in publications:
                if publication.scheduled_date is not None:
                    by_day.setdefault(publication.scheduled_date, []).append(publication)

            days: list[CalendarDay] = []
            for offset in range(length):
                day = start + timedelta(days=offset)
                placed = sorted(by_day.get(day, []), key=lambda p: p.id or 0)
                scheduled = sum(1 for p in placed if p.holds_slot())
                block = blocked.get(day)
                days.append(
                    CalendarDay(
                        date=day,
                        blocked=block is not None,
                        block_reason=block.reason if block else None,
                        scheduled_count=scheduled,
                        remaining_capacity=0 if block else max(0, capacity - scheduled),
                        entries=tuple(
                            CalendarEntry(
                                publication_id=p.id or 0,
                                manuscript_id=p.manuscript_id,
                                manuscript_title=titles.get(p.manuscript_id),
                                market=p.market,
                                status=p.status,
                            )
                            for p in placed
                        ),
                    )
                )
            return days, []

        return self.scheduling.transaction(work, operation="get_calendar")

    def get_month(self, year: int, month: int) -> tuple[list[CalendarDay], list[SchedulingError]]:
        if not 1 <= month <= 12 or not MINYEAR <= year <= MAXYEAR:
            return [], [
                SchedulingError(code="invalid_range", message=f"Invalid month: {year}-{month}")
            ]
        start, end = month_bounds(year, month)
        return self.get_calendar(start, end)

    def publication_stats(self) -> PublicationStats:
        """Counts by status, overall and for every configured market."""

        def work(uow: UnitOfWorkPort) -> tuple[PublicationStats, list[SchedulingError]]:
            publications = uow.publications.list_all()
            by_market = {
                market: _count([p for p in publications if p.market == market])
                for market in self.scheduling.config.markets
            }
            return PublicationStats(totals=_count(publications), by_market=by_market), []

        stats, _ = self.scheduling.transaction(work, operation="publication_stats")
        return stats
