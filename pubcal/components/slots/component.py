"""
Slot Finder - earliest date with free capacity.

Deterministic forward scan: starting at max(from_date, today), test each
successive date in order and return the first one that is not blocked and
still has capacity. The scan order is the tie-break.

Invariants:
- never returns a blocked date
- never returns a date at capacity
- never returns a date before today
- terminates after `horizon_days` candidates, or at date.max
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta

from pubcal.components.blocked_dates import BlockedDateRegistry
from pubcal.components.capacity import CapacityIndex


class SlotFinder:
    """Slot search over one unit of work's capacity and block views."""

    def __init__(
        self,
        capacity: CapacityIndex,
        blocked: BlockedDateRegistry,
        *,
        today: date,
        horizon_days: int,
    ) -> None:
        if horizon_days < 1:
            raise ValueError("horizon_days must be at least 1")
        self._capacity = capacity
        self._blocked = blocked
        self._today = today
        self.horizon_days = horizon_days

    def candidates(self, from_date: date) -> Iterator[date]:
        """Dates scanned for `from_date`, in order."""
        start = max(from_date, self._today)
        steps = min(self.horizon_days, (date.max - start).days + 1)
        for offset in range(steps):
            yield start + timedelta(days=offset)

    def is_available(self, day: date) -> bool:
        if day < self._today:
            return False
        if self._blocked.is_blocked(day):
            return False
        return self._capacity.has_capacity(day)

    def next_available(self, from_date: date) -> date | None:
        """
        First available date on or after `from_date`.

        Returns:
            The date, or None when the horizon is exhausted.
        """
        for day in self.candidates(from_date):
            if self.is_available(day):
                return day
        return None
