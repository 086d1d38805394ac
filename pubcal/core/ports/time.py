"""
Time port.

"Today" is the only wall-clock input of the scheduling engine; it is
injected so tests can pin it.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

    def today(self) -> date:
        """Get the current calendar date."""
        ...
