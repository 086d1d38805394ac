"""
Scheduling component - publication date assignment.

Invariants:
- a date never holds more than `daily_capacity` scheduled publications
- no scheduled publication sits on a blocked date after an operation
- every date written is today or later
- multi-market requests are all-or-nothing on validation, partial on capacity
"""

from __future__ import annotations

from ._impl import SchedulingConfig, SchedulingService
from .models import (
    BlockDateInput,
    BlockDateOutput,
    BlockedDateListOutput,
    ListBlockedDatesInput,
    ScheduleMarketsInput,
    ScheduleMarketsOutput,
    UnblockDateInput,
    UnblockDateOutput,
)
from .ports import ClockPort, RulesPort, UnitOfWorkFactory


def _build_config(rules: RulesPort | None) -> SchedulingConfig:
    """Build scheduling config from rules port."""
    if rules is None:
        return SchedulingConfig()

    return SchedulingConfig(
        daily_capacity=rules.get_daily_capacity(),
        horizon_days=rules.get_horizon_days(),
        max_past_start_days=rules.get_max_past_start_days(),
        max_transaction_attempts=rules.get_max_transaction_attempts(),
        markets=rules.get_market_codes(),
    )


def create_scheduling_service(
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> SchedulingService:
    """Create scheduling service from ports."""
    return SchedulingService(
        uow_factory=uow_factory,
        clock=clock,
        config=_build_config(rules),
    )


# --- Component Entry Points ---


def run_schedule_markets(
    inp: ScheduleMarketsInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> ScheduleMarketsOutput:
    """
    Schedule a manuscript on several markets.

    Args:
        inp: Input containing manuscript_id, markets and optional start date.
        uow_factory: Unit of work factory.
        clock: Optional clock for "today".
        rules: Optional rules port for configuration.

    Returns:
        ScheduleMarketsOutput with per-market result or errors.
    """
    service = create_scheduling_service(uow_factory, clock, rules)

    result, errors = service.schedule_markets(
        manuscript_id=inp.manuscript_id,
        markets=inp.markets,
        start_date=inp.start_date,
    )

    return ScheduleMarketsOutput(
        result=result,
        errors=errors,
        success=len(errors) == 0,
    )


def run_block_date(
    inp: BlockDateInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> BlockDateOutput:
    """
    Block a date and move publications off it.

    Args:
        inp: Input containing the date and optional reason.
        uow_factory: Unit of work factory.
        clock: Optional clock for "today".
        rules: Optional rules port for configuration.

    Returns:
        BlockDateOutput with displacement report or errors.
    """
    service = create_scheduling_service(uow_factory, clock, rules)

    result, errors = service.block_date(inp.date, inp.reason)

    return BlockDateOutput(
        result=result,
        errors=errors,
        success=len(errors) == 0,
    )


def run_unblock_date(
    inp: UnblockDateInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> UnblockDateOutput:
    """Remove a blocked date."""
    service = create_scheduling_service(uow_factory, clock, rules)

    removed, errors = service.unblock_date(inp.blocked_date_id)

    return UnblockDateOutput(
        unblocked=removed,
        errors=errors,
        success=len(errors) == 0,
    )


def run_list_blocked_dates(
    inp: ListBlockedDatesInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> BlockedDateListOutput:
    service = create_scheduling_service(uow_factory, clock, rules)

    rows = service.list_blocked_dates(inp.start, inp.end)

    return BlockedDateListOutput(blocked_dates=rows, total=len(rows))


def run(
    inp: ScheduleMarketsInput | BlockDateInput | UnblockDateInput | ListBlockedDatesInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> ScheduleMarketsOutput | BlockDateOutput | UnblockDateOutput | BlockedDateListOutput:
    """
    Main entry point for the scheduling component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ScheduleMarketsInput):
        return run_schedule_markets(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, BlockDateInput):
        return run_block_date(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, UnblockDateInput):
        return run_unblock_date(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, ListBlockedDatesInput):
        return run_list_blocked_dates(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
