"""
Scheduling component - multi-market date assignment and blocking.
"""

from ._impl import DEFAULT_MARKETS, SchedulingConfig, SchedulingService
from .component import (
    create_scheduling_service,
    run,
    run_block_date,
    run_list_blocked_dates,
    run_schedule_markets,
    run_unblock_date,
)
from .models import (
    BlockDateInput,
    BlockDateOutput,
    BlockDateResult,
    BlockedDateListOutput,
    Displacement,
    ListBlockedDatesInput,
    MarketAssignment,
    MarketFailure,
    ScheduleMarketsInput,
    ScheduleMarketsOutput,
    ScheduleMarketsResult,
    UnblockDateInput,
    UnblockDateOutput,
)
from .ports import ClockPort, RulesPort, UnitOfWorkFactory, UnitOfWorkPort

__all__ = [
    # Entry points
    "run",
    "run_block_date",
    "run_list_blocked_dates",
    "run_schedule_markets",
    "run_unblock_date",
    "create_scheduling_service",
    # Input models
    "BlockDateInput",
    "ListBlockedDatesInput",
    "ScheduleMarketsInput",
    "UnblockDateInput",
    # Output models
    "BlockDateOutput",
    "BlockDateResult",
    "BlockedDateListOutput",
    "Displacement",
    "MarketAssignment",
    "MarketFailure",
    "ScheduleMarketsOutput",
    "ScheduleMarketsResult",
    "UnblockDateOutput",
    # Ports
    "ClockPort",
    "RulesPort",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
    # Service
    "DEFAULT_MARKETS",
    "SchedulingConfig",
    "SchedulingService",
]
