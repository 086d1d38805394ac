"""
Capacity Index - per-date count of scheduled publications.

Invariants:
- only status == "scheduled" rows count; pending and published never do
- always a fresh query against the transaction it is bound to,
      never cached across operations
"""

from __future__ import annotations

from datetime import date

from .ports import ScheduledCountPort


class CapacityIndex:
    """Capacity view bound to one unit of work."""

    def __init__(self, repo: ScheduledCountPort, daily_capacity: int) -> None:
        if daily_capacity < 1:
            raise ValueError("daily_capacity must be at least 1")
        self._repo = repo
        self.daily_capacity = daily_capacity

    def count_on_date(self, day: date, exclude_publication_id: int | None = None) -> int:
        """Scheduled publications on `day`, optionally ignoring one row."""
        return self._repo.count_scheduled_on(day, exclude_id=exclude_publication_id)

    def has_capacity(self, day: date, exclude_publication_id: int | None = None) -> bool:
        return self.count_on_date(day, exclude_publication_id) < self.daily_capacity
