from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pubcal.adapters.clock import SystemClock
from pubcal.adapters.sqlite_db import sqlite_uow_factory
from pubcal.components.calendar import CalendarService
from pubcal.components.lifecycle import LifecycleService
from pubcal.components.scheduling import SchedulingService, create_scheduling_service
from pubcal.rules.adapter import SchedulingRulesAdapter
from pubcal.rules.models import Rules


@dataclass
class ServiceContext:
    scheduling: SchedulingService
    lifecycle: LifecycleService
    calendar: CalendarService
    rules: Rules
    uow_factory: Any

    @classmethod
    def create(cls, db_path: str, rules: Rules, clock: Any = None) -> ServiceContext:
        uow_factory = sqlite_uow_factory(db_path, rules.storage.busy_timeout_seconds)
        return cls.from_factory(uow_factory, rules, clock)

    @classmethod
    def from_factory(cls, uow_factory: Any, rules: Rules, clock: Any = None) -> ServiceContext:
        scheduling = create_scheduling_service(
            uow_factory,
            clock or SystemClock(),
            SchedulingRulesAdapter(rules),
        )
        return cls(
            scheduling=scheduling,
            lifecycle=LifecycleService(scheduling),
            calendar=CalendarService(scheduling),
            rules=rules,
            uow_factory=uow_factory,
        )
