"""
Blocked Date Registry - dates excluded from scheduling.

Invariants:
- at most one record per calendar date
- blocking never moves publications by itself; displacement is the
  scheduling engine's job, inside the same transaction
- unblocking is never retroactive
"""

from __future__ import annotations

from datetime import date

from pubcal.core.entities import BlockedDate, utc_now
from pubcal.core.errors import SchedulingError

from .ports import BlockedDateRepoPort


class BlockedDateRegistry:
    """Blocked date registry bound to one unit of work."""

    def __init__(self, repo: BlockedDateRepoPort) -> None:
        self._repo = repo

    def is_blocked(self, day: date) -> bool:
        return self._repo.get_by_date(day) is not None

    def block(
        self,
        day: date,
        reason: str | None = None,
    ) -> tuple[BlockedDate | None, list[SchedulingError]]:
        """
        Block a date.

        Returns:
            Tuple of (blocked_date, errors). `already_blocked` if present.
        """
        existing = self._repo.get_by_date(day)
        if existing is not None:
            return None, [
                SchedulingError(
                    code="already_blocked",
                    message=f"Date {day.isoformat()} is already blocked",
                    blocked_date_id=existing.id,
                    date=day,
                )
            ]

        reason = reason.strip() if reason else None
        saved = self._repo.add(BlockedDate(date=day, reason=reason or None, created_at=utc_now()))
        return saved, []

    def unblock(self, blocked_id: int) -> tuple[BlockedDate | None, list[SchedulingError]]:
        """
        Remove a block.

        Returns:
            Tuple of (removed record, errors). `not_found` if missing.
        """
        existing = self._repo.get_by_id(blocked_id)
        if existing is None:
            return None, [
                SchedulingError(
                    code="not_found",
                    message=f"Blocked date {blocked_id} not found",
                    blocked_date_id=blocked_id,
                )
            ]

        self._repo.delete(blocked_id)
        return existing, []

    def list_blocked(
        self, start: date | None = None, end: date | None = None
    ) -> list[BlockedDate]:
        return self._repo.list_in_range(start, end)
