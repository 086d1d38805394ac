from functools import lru_cache
from typing import Any

from fastapi import Depends, HTTPException

from pubcal.adapters.clock import SystemClock
from pubcal.adapters.sqlite_db import sqlite_uow_factory
from pubcal.app_shell.config import Settings
from pubcal.components.calendar import CalendarService
from pubcal.components.lifecycle import LifecycleService
from pubcal.components.scheduling import SchedulingService, create_scheduling_service
from pubcal.core.errors import ErrorCode, SchedulingError
from pubcal.rules.adapter import SchedulingRulesAdapter
from pubcal.rules.loader import load_rules
from pubcal.rules.models import Rules


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_scheduling_rules(rules: Rules = Depends(get_rules)) -> SchedulingRulesAdapter:
    return SchedulingRulesAdapter(rules)


# --- Storage ---
def get_uow_factory(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> Any:
    return sqlite_uow_factory(settings.db_path, rules.storage.busy_timeout_seconds)


# Time adapter for deterministic date operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Component Services ---
def get_scheduling_service(
    uow_factory: Any = Depends(get_uow_factory),
    clock: Any = Depends(get_clock),
    rules: SchedulingRulesAdapter = Depends(get_scheduling_rules),
) -> SchedulingService:
    """Get scheduling component service."""
    return create_scheduling_service(uow_factory, clock, rules)


def get_lifecycle_service(
    scheduling: SchedulingService = Depends(get_scheduling_service),
) -> LifecycleService:
    """Get lifecycle component service."""
    return LifecycleService(scheduling)


def get_calendar_service(
    scheduling: SchedulingService = Depends(get_scheduling_service),
) -> CalendarService:
    """Get calendar component service."""
    return CalendarService(scheduling)


# --- Error mapping ---

ERROR_STATUS: dict[ErrorCode, int] = {
    "not_found": 404,
    "already_blocked": 409,
    "date_unavailable": 409,
    "invalid_transition": 409,
    "past_date": 400,
    "invalid_market": 400,
    "invalid_range": 400,
    "no_capacity_within_horizon": 409,
    "unresolved_displacement": 409,
}


def raise_for_errors(errors: list[SchedulingError]) -> None:
    """
    Raise HTTPException for domain errors.

    The status comes from the first error; every error is returned in
    `detail.errors`.
    """
    if not errors:
        return
    status_code = ERROR_STATUS.get(errors[0].code, 400)
    raise HTTPException(
        status_code=status_code,
        detail={"errors": [e.to_dict() for e in errors]},
    )
