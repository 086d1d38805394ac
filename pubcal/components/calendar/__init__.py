"""
Calendar component - calendar read model and publication statistics.
"""

from ._impl import MAX_RANGE_DAYS, CalendarService, month_bounds
from .component import (
    create_calendar_service,
    run,
    run_get_calendar,
    run_publication_stats,
)
from .models import (
    CalendarDay,
    CalendarEntry,
    CalendarOutput,
    GetCalendarInput,
    GetMonthInput,
    PublicationStats,
    PublicationStatsInput,
    PublicationStatsOutput,
    StatusCounts,
)

__all__ = [
    # Entry points
    "run",
    "run_get_calendar",
    "run_publication_stats",
    "create_calendar_service",
    # Input models
    "GetCalendarInput",
    "GetMonthInput",
    "PublicationStatsInput",
    # Output models
    "CalendarDay",
    "CalendarEntry",
    "CalendarOutput",
    "PublicationStats",
    "PublicationStatsOutput",
    "StatusCounts",
    # Service
    "CalendarService",
    "MAX_RANGE_DAYS",
    "month_bounds",
]
