"""
Blocked dates component port definitions.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from pubcal.core.entities import BlockedDate


class BlockedDateRepoPort(Protocol):
    """Repository interface for blocked dates."""

    def get_by_id(self, blocked_id: int) -> BlockedDate | None:
        """Get blocked date by ID."""
        ...

    def get_by_date(self, day: date) -> BlockedDate | None:
        """Get blocked date record for a calendar date."""
        ...

    def add(self, blocked: BlockedDate) -> BlockedDate:
        """Insert a blocked date."""
        ...

    def delete(self, blocked_id: int) -> None:
        """Delete blocked date."""
        ...

    def list_in_range(self, start: date | None, end: date | None) -> list[BlockedDate]:
        """List blocked dates ascending; None bounds are open."""
        ...
