"""
Capacity component port definitions.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol


class ScheduledCountPort(Protocol):
    """Read side of the publication repository used for capacity checks."""

    def count_scheduled_on(self, day: date, exclude_id: int | None = None) -> int:
        """Count scheduled publications on a date."""
        ...
