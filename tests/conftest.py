from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from pubcal.adapters.memory import memory_uow_factory
from pubcal.adapters.sqlite.migrator import SQLiteMigrator
from pubcal.adapters.sqlite_db import sqlite_uow_factory
from pubcal.components.calendar import CalendarService
from pubcal.components.lifecycle import LifecycleService
from pubcal.components.scheduling import SchedulingConfig, SchedulingService
from pubcal.core.entities import BlockedDate, Publication
from pubcal.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]

TODAY = date(2026, 1, 5)


class FixedClock:
    """Clock pinned to one date."""

    def __init__(self, today: date = TODAY):
        self._today = today

    def now_utc(self) -> datetime:
        return datetime(self._today.year, self._today.month, self._today.day, 12, tzinfo=UTC)

    def today(self) -> date:
        return self._today


class Seeder:
    """
    Writes fixture rows straight through a unit of work, bypassing the
    scheduling rules, so tests can build arbitrary starting states.
    """

    def __init__(self, uow_factory):
        self.uow_factory = uow_factory

    def manuscript(self, title: str = "Manuscript") -> int:
        with self.uow_factory() as uow:
            manuscript = uow.manuscripts.add(title)
            uow.commit()
        return manuscript.id

    def scheduled(self, manuscript_id: int, market: str, day: date) -> int:
        return self._add(
            Publication(
                manuscript_id=manuscript_id,
                market=market,
                status="scheduled",
                scheduled_date=day,
            )
        )

    def published(self, manuscript_id: int, market: str, day: date) -> int:
        return self._add(
            Publication(
                manuscript_id=manuscript_id,
                market=market,
                status="published",
                scheduled_date=day,
                published_date=day,
            )
        )

    def pending(self, manuscript_id: int, market: str) -> int:
        return self._add(Publication(manuscript_id=manuscript_id, market=market))

    def fill(self, day: date, count: int = 3, title: str = "Filler") -> list[int]:
        """Occupy `count` slots on `day` with fresh manuscripts."""
        return [
            self.scheduled(self.manuscript(f"{title} {i}"), "amazon.com", day)
            for i in range(count)
        ]

    def block(self, day: date, reason: str | None = None) -> int:
        with self.uow_factory() as uow:
            saved = uow.blocked_dates.add(BlockedDate(date=day, reason=reason))
            uow.commit()
        return saved.id

    def get(self, publication_id: int) -> Publication | None:
        with self.uow_factory() as uow:
            return uow.publications.get_by_id(publication_id)

    def all(self) -> list[Publication]:
        with self.uow_factory() as uow:
            return uow.publications.list_all()

    def _add(self, publication: Publication) -> int:
        with self.uow_factory() as uow:
            saved = uow.publications.add(publication)
            uow.commit()
        return saved.id


# --- Core fixtures ---


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock(today) -> FixedClock:
    return FixedClock(today)


@pytest.fixture
def config() -> SchedulingConfig:
    return SchedulingConfig()


@pytest.fixture
def rules():
    return load_rules(PROJECT_ROOT / "rules.yaml")


# --- In-memory store ---


@pytest.fixture
def uow_factory():
    return memory_uow_factory()


@pytest.fixture
def seed(uow_factory) -> Seeder:
    return Seeder(uow_factory)


@pytest.fixture
def scheduling(uow_factory, clock, config) -> SchedulingService:
    return SchedulingService(uow_factory=uow_factory, clock=clock, config=config)


@pytest.fixture
def lifecycle(scheduling) -> LifecycleService:
    return LifecycleService(scheduling)


@pytest.fixture
def calendar(scheduling) -> CalendarService:
    return CalendarService(scheduling)


# --- SQLite store ---


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "pubcal.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def sqlite_factory(db_path):
    return sqlite_uow_factory(db_path, busy_timeout_seconds=0.2)


@pytest.fixture
def sqlite_seed(sqlite_factory) -> Seeder:
    return Seeder(sqlite_factory)
