"""
Scheduling component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from pubcal.core.ports.db import UnitOfWorkFactory, UnitOfWorkPort
from pubcal.core.ports.time import ClockPort

__all__ = [
    "ClockPort",
    "RulesPort",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
]


class RulesPort(Protocol):
    """Port for scheduling rules configuration."""

    def get_daily_capacity(self) -> int:
        """Get maximum scheduled publications per date."""
        ...

    def get_horizon_days(self) -> int:
        """Get how many dates the slot finder scans."""
        ...

    def get_max_past_start_days(self) -> int:
        """Get how far in the past a scheduling start date may be."""
        ...

    def get_market_codes(self) -> tuple[str, ...]:
        """Get the closed set of marketplace codes."""
        ...

    def get_max_transaction_attempts(self) -> int:
        """Get how often a conflicting transaction is retried."""
        ...
