"""
SchedulingService - publication date assignment and block conflict resolution.

Key behaviors:
- Markets are scheduled in request order; each market gets the earliest
  available date on or after the previous market's date (same-date packing
  is allowed while capacity remains)
- A market that finds no slot within the horizon fails on its own; the
  others still get their dates
- Blocking a date moves every scheduled publication off it, ascending ID,
  to the next available date after it
- Each operation runs in one transaction; dates written earlier in the
  operation count against capacity for later steps
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TypeVar

from pubcal.adapters.clock import SystemClock
from pubcal.components.blocked_dates import BlockedDateRegistry
from pubcal.components.capacity import CapacityIndex
from pubcal.components.slots import SlotFinder
from pubcal.core.entities import BlockedDate, Publication, utc_now
from pubcal.core.errors import SchedulingError
from pubcal.core.transactions import run_in_transaction

from .models import (
    BlockDateResult,
    Displacement,
    MarketAssignment,
    MarketFailure,
    ScheduleMarketsResult,
)
from .ports import ClockPort, UnitOfWorkFactory, UnitOfWorkPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

# --- Configuration ---

DEFAULT_MARKETS: tuple[str, ...] = (
    "amazon.com",
    "amazon.es",
    "amazon.es-ca",
    "amazon.de",
    "amazon.fr",
    "amazon.it",
    "amazon.co.uk",
    "amazon.com.br",
)


@dataclass(frozen=True)
class SchedulingConfig:
    """Scheduling configuration from rules."""

    daily_capacity: int = 3
    horizon_days: int = 365
    max_past_start_days: int = 30
    max_transaction_attempts: int = 3
    markets: tuple[str, ...] = DEFAULT_MARKETS


DEFAULT_CONFIG = SchedulingConfig()


@dataclass
class _Views:
    """Capacity, block and slot views bound to one unit of work."""

    capacity: CapacityIndex
    blocked: BlockedDateRegistry
    slots: SlotFinder


class SchedulingService:
    """
    Scheduling engine.

    Owns every write of `scheduled_date`. The lifecycle manager delegates
    its reschedule checks here through `move_publication`.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: ClockPort | None = None,
        config: SchedulingConfig | None = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.clock: ClockPort = clock or SystemClock()
        self.config = config or DEFAULT_CONFIG

    # --- Helpers ---

    def views(self, uow: UnitOfWorkPort, today: date) -> _Views:
        capacity = CapacityIndex(uow.publications, self.config.daily_capacity)
        blocked = BlockedDateRegistry(uow.blocked_dates)
        slots = SlotFinder(
            capacity,
            blocked,
            today=today,
            horizon_days=self.config.horizon_days,
        )
        return _Views(capacity=capacity, blocked=blocked, slots=slots)

    def transaction(
        self,
        work: Callable[[UnitOfWorkPort], tuple[T, list[SchedulingError]]],
        *,
        operation: str,
    ) -> tuple[T, list[SchedulingError]]:
        return run_in_transaction(
            self.uow_factory,
            work,
            max_attempts=self.config.max_transaction_attempts,
            operation=operation,
        )

    def is_known_market(self, market: str) -> bool:
        return market in self.config.markets

    # --- Multi-market scheduling ---

    def schedule_markets(
        self,
        manuscript_id: int,
        markets: list[str] | tuple[str, ...],
        start_date: date | None = None,
    ) -> tuple[ScheduleMarketsResult | None, list[SchedulingError]]:
        """
        Assign dates to a manuscript across several markets.

        Returns:
            Tuple of (result, errors). Errors reject the whole request;
            per-market failures are reported in `result.failed`.
        """
        today = self.clock.today()
        errors: list[SchedulingError] = []

        if not markets:
            errors.append(
                SchedulingError(code="invalid_market", message="At least one market is required")
            )
        for market in markets:
            if not self.is_known_market(market):
                errors.append(
                    SchedulingError(
                        code="invalid_market",
                        message=f"Unknown market: {market}",
                        market=market,
                    )
                )

        start = start_date or today
        earliest = today - timedelta(days=self.config.max_past_start_days)
        if start < earliest:
            errors.append(
                SchedulingError(
                    code="past_date",
                    message=f"Start date {start.isoformat()} is too far in the past",
                    date=start,
                )
            )

        if errors:
            return None, errors

        ordered = list(dict.fromkeys(markets))

        def work(
            uow: UnitOfWorkPort,
        ) -> tuple[ScheduleMarketsResult | None, list[SchedulingError]]:
            if uow.manuscripts.get_by_id(manuscript_id) is None:
                return None, [
                    SchedulingError(
                        code="not_found",
                        message=f"Manuscript {manuscript_id} not found",
                    )
                ]

            views = self.views(uow, today)
            cursor = max(start, today)
            assigned: list[MarketAssignment] = []
            failed: list[MarketFailure] = []
            skipped: list[str] = []

            for market in ordered:
                existing = uow.publications.get_for_market(manuscript_id, market)
                if existing is not None and existing.status != "pending":
                    skipped.append(market)
                    continue

                slot = views.slots.next_available(cursor)
                if slot is None:
                    logger.warning(
                        "No capacity within %d days of %s for manuscript %d on %s",
                        self.config.horizon_days,
                        cursor.isoformat(),
                        manuscript_id,
                        market,
                    )
                    failed.append(
                        MarketFailure(
                            market=market,
                            code="no_capacity_within_horizon",
                            message=(
                                f"No available date within {self.config.horizon_days} days "
                                f"of {cursor.isoformat()}"
                            ),
                        )
                    )
                    continue

                if existing is not None:
                    existing.status = "scheduled"
                    existing.scheduled_date = slot
                    existing.updated_at = utc_now()
                    saved = uow.publications.update(existing)
                else:
                    saved = uow.publications.add(
                        Publication(
                            manuscript_id=manuscript_id,
                            market=market,
                            status="scheduled",
                            scheduled_date=slot,
                        )
                    )

                assigned.append(
                    MarketAssignment(market=market, date=slot, publication_id=saved.id or 0)
                )
                cursor = slot

            logger.info(
                "Scheduled manuscript %d: %d assigned, %d failed, %d skipped",
                manuscript_id,
                len(assigned),
                len(failed),
                len(skipped),
            )
            return (
                ScheduleMarketsResult(
                    manuscript_id=manuscript_id,
                    assigned=tuple(assigned),
                    failed=tuple(failed),
                    skipped=tuple(skipped),
                ),
                [],
            )

        return self.transaction(work, operation="schedule_markets")

    # --- Blocking ---

    def block_date(
        self,
        day: date,
        reason: str | None = None,
    ) -> tuple[BlockDateResult | None, list[SchedulingError]]:
        """
        Block a date and move scheduled publications off it.

        Publications that find no date within the horizon stay where they
        are and are reported as unresolved.

        Returns:
            Tuple of (result, errors). `already_blocked` rejects the request.
        """
        today = self.clock.today()

        def work(uow: UnitOfWorkPort) -> tuple[BlockDateResult | None, list[SchedulingError]]:
            views = self.views(uow, today)
            blocked, errors = views.blocked.block(day, reason)
            if errors or blocked is None:
                return None, errors

            # Nothing follows date.max, so its rows stay unresolved
            search_from = max(day + timedelta(days=1), today) if day < date.max else None
            rescheduled: list[Displacement] = []
            unresolved: list[int] = []
            warnings: list[SchedulingError] = []

            for publication in uow.publications.list_scheduled_on(day):
                new_day = views.slots.next_available(search_from) if search_from else None
                if new_day is None:
                    logger.warning(
                        "Publication %d left on blocked date %s: no capacity within horizon",
                        publication.id,
                        day.isoformat(),
                    )
                    unresolved.append(publication.id or 0)
                    warnings.append(
                        SchedulingError(
                            code="unresolved_displacement",
                            message=(
                                f"Publication {publication.id} could not be moved off "
                                f"{day.isoformat()}"
                            ),
                            publication_id=publication.id,
                            blocked_date_id=blocked.id,
                            date=day,
                        )
                    )
                    continue

                publication.scheduled_date = new_day
                publication.updated_at = utc_now()
                uow.publications.update(publication)
                rescheduled.append(
                    Displacement(
                        publication_id=publication.id or 0,
                        from_date=day,
                        to_date=new_day,
                    )
                )

            logger.info(
                "Blocked %s: %d rescheduled, %d unresolved",
                day.isoformat(),
                len(rescheduled),
                len(unresolved),
            )
            return (
                BlockDateResult(
                    blocked_date=blocked,
                    rescheduled=tuple(rescheduled),
                    unresolved=tuple(unresolved),
                    warnings=tuple(warnings),
                ),
                [],
            )

        return self.transaction(work, operation="block_date")

    def unblock_date(self, blocked_id: int) -> tuple[BlockedDate | None, list[SchedulingError]]:
        """
        Remove a block. Publications previously moved off it stay put.
        """

        def work(uow: UnitOfWorkPort) -> tuple[BlockedDate | None, list[SchedulingError]]:
            removed, errors = BlockedDateRegistry(uow.blocked_dates).unblock(blocked_id)
            if removed is not None:
                logger.info("Unblocked %s", removed.date.isoformat())
            return removed, errors

        return self.transaction(work, operation="unblock_date")

    def list_blocked_dates(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[BlockedDate]:
        def work(uow: UnitOfWorkPort) -> tuple[list[BlockedDate], list[SchedulingError]]:
            return BlockedDateRegistry(uow.blocked_dates).list_blocked(start, end), []

        rows, _ = self.transaction(work, operation="list_blocked_dates")
        return rows

    # --- Single-publication moves ---

    def move_publication(
        self,
        uow: UnitOfWorkPort,
        publication: Publication,
        new_date: date,
        today: date,
    ) -> tuple[Publication, list[SchedulingError]]:
        """
        Move a scheduled publication to `new_date` within `uow`.

        The publication's own row is excluded from the capacity count.
        Moving to the current date is a no-op.
        """
        if new_date < today:
            return publication, [
                SchedulingError(
                    code="past_date",
                    message=f"Date {new_date.isoformat()} is in the past",
                    publication_id=publication.id,
                    date=new_date,
                )
            ]

        if publication.scheduled_date == new_date:
            return publication, []

        views = self.views(uow, today)
        if views.blocked.is_blocked(new_date):
            return publication, [
                SchedulingError(
                    code="date_unavailable",
                    message=f"Date {new_date.isoformat()} is blocked",
                    publication_id=publication.id,
                    date=new_date,
                )
            ]

        if not views.capacity.has_capacity(new_date, exclude_publication_id=publication.id):
            return publication, [
                SchedulingError(
                    code="date_unavailable",
                    message=(
                        f"Date {new_date.isoformat()} already has "
                        f"{self.config.daily_capacity} publications scheduled"
                    ),
                    publication_id=publication.id,
                    date=new_date,
                )
            ]

        old_date = publication.scheduled_date
        publication.scheduled_date = new_date
        publication.updated_at = utc_now()
        uow.publications.update(publication)
        logger.info(
            "Moved publication %s from %s to %s",
            publication.id,
            old_date.isoformat() if old_date else None,
            new_date.isoformat(),
        )
        return publication, []
