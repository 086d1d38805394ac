"""
Calendar component - per-day view of publications and blocks.
"""

from __future__ import annotations

from pubcal.components.scheduling import (
    ClockPort,
    RulesPort,
    UnitOfWorkFactory,
    create_scheduling_service,
)

from ._impl import CalendarService
from .models import (
    CalendarOutput,
    GetCalendarInput,
    GetMonthInput,
    PublicationStatsInput,
    PublicationStatsOutput,
)


def create_calendar_service(
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> CalendarService:
    """Create calendar service from ports."""
    return CalendarService(create_scheduling_service(uow_factory, clock, rules))


# --- Component Entry Points ---


def run_get_calendar(
    inp: GetCalendarInput | GetMonthInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> CalendarOutput:
    """
    Build the calendar for a date range or a month.

    Args:
        inp: Either an explicit range or a year/month pair.
        uow_factory: Unit of work factory.
        clock: Optional clock.
        rules: Optional rules port for configuration.

    Returns:
        CalendarOutput with one day per date or errors.
    """
    service = create_calendar_service(uow_factory, clock, rules)

    if isinstance(inp, GetMonthInput):
        days, errors = service.get_month(inp.year, inp.month)
    else:
        days, errors = service.get_calendar(inp.start, inp.end)

    return CalendarOutput(days=days, errors=errors, success=len(errors) == 0)


def run_publication_stats(
    inp: PublicationStatsInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationStatsOutput:
    service = create_calendar_service(uow_factory, clock, rules)
    return PublicationStatsOutput(stats=service.publication_stats())


def run(
    inp: GetCalendarInput | GetMonthInput | PublicationStatsInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> CalendarOutput | PublicationStatsOutput:
    """Main entry point for the calendar component."""
    if isinstance(inp, GetCalendarInput | GetMonthInput):
        return run_get_calendar(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, PublicationStatsInput):
        return run_publication_stats(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
