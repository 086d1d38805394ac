"""
Scheduling error taxonomy.

Domain failures are returned as values, never raised: every operation yields
`(result, errors)`. Each error names the publication, blocked date, market or
date it concerns so callers can target their message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal

ErrorCode = Literal[
    "already_blocked",
    "not_found",
    "date_unavailable",
    "past_date",
    "invalid_transition",
    "no_capacity_within_horizon",
    "unresolved_displacement",
    "invalid_market",
    "invalid_range",
]


@dataclass(frozen=True)
class SchedulingError:
    """Scheduling operation error."""

    code: ErrorCode
    message: str
    publication_id: int | None = None
    blocked_date_id: int | None = None
    market: str | None = None
    date: date | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "publication_id": self.publication_id,
            "blocked_date_id": self.blocked_date_id,
            "market": self.market,
            "date": self.date.isoformat() if self.date else None,
        }
