"""
In-memory storage adapter.

Implements the same unit-of-work port as the SQLite adapter. A store-wide
lock is held for the lifetime of each unit of work (serialized writers), and
a snapshot taken on entry is restored on rollback.

Used by the unit tests and for throwaway local runs.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from pubcal.core.entities import BlockedDate, Manuscript, Publication


@dataclass
class _State:
    manuscripts: dict[int, Manuscript] = field(default_factory=dict)
    publications: dict[int, Publication] = field(default_factory=dict)
    blocked: dict[int, BlockedDate] = field(default_factory=dict)
    next_ids: dict[str, int] = field(
        default_factory=lambda: {"manuscripts": 1, "publications": 1, "blocked": 1}
    )

    def allocate(self, table: str) -> int:
        value = self.next_ids[table]
        self.next_ids[table] = value + 1
        return value


class InMemoryStore:
    """Shared state behind all in-memory units of work."""

    def __init__(self) -> None:
        self.state = _State()
        self.lock = threading.RLock()


class InMemoryManuscriptRepo:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, manuscript_id: int) -> Manuscript | None:
        return self._store.state.manuscripts.get(manuscript_id)

    def get_titles(self, manuscript_ids: Sequence[int]) -> dict[int, str]:
        found = self._store.state.manuscripts
        return {mid: found[mid].title for mid in set(manuscript_ids) if mid in found}

    def add(self, title: str) -> Manuscript:
        manuscript = Manuscript(id=self._store.state.allocate("manuscripts"), title=title)
        self._store.state.manuscripts[manuscript.id] = manuscript
        return manuscript


class InMemoryPublicationRepo:
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Publication]:
        return self._store.state.publications

    def _sorted(self, rows: list[Publication]) -> list[Publication]:
        return [replace(p) for p in sorted(rows, key=lambda p: p.id or 0)]

    def get_by_id(self, publication_id: int) -> Publication | None:
        row = self._rows.get(publication_id)
        return replace(row) if row else None

    def get_for_market(self, manuscript_id: int, market: str) -> Publication | None:
        for row in self._rows.values():
            if row.manuscript_id == manuscript_id and row.market == market:
                return replace(row)
        return None

    def list_for_manuscript(self, manuscript_id: int) -> list[Publication]:
        return self._sorted([p for p in self._rows.values() if p.manuscript_id == manuscript_id])

    def list_all(self) -> list[Publication]:
        return self._sorted(list(self._rows.values()))

    def list_scheduled_on(self, day: date) -> list[Publication]:
        return self._sorted(
            [p for p in self._rows.values() if p.status == "scheduled" and p.scheduled_date == day]
        )

    def list_in_range(self, start: date, end: date) -> list[Publication]:
        rows = [
            p
            for p in self._rows.values()
            if p.scheduled_date is not None and start <= p.scheduled_date <= end
        ]
        rows.sort(key=lambda p: (p.scheduled_date, p.id or 0))
        return [replace(p) for p in rows]

    def count_scheduled_on(self, day: date, exclude_id: int | None = None) -> int:
        return sum(
            1
            for p in self._rows.values()
            if p.status == "scheduled" and p.scheduled_date == day and p.id != exclude_id
        )

    def add(self, publication: Publication) -> Publication:
        for row in self._rows.values():
            if row.manuscript_id == publication.manuscript_id and row.market == publication.market:
                raise ValueError(
                    f"Publication for manuscript {publication.manuscript_id} "
                    f"on {publication.market} already exists"
                )
        publication.id = self._store.state.allocate("publications")
        self._rows[publication.id] = replace(publication)
        return publication

    def update(self, publication: Publication) -> Publication:
        if publication.id not in self._rows:
            raise KeyError(publication.id)
        self._rows[publication.id] = replace(publication)
        return publication

    def delete(self, publication_id: int) -> None:
        self._rows.pop(publication_id, None)


class InMemoryBlockedDateRepo:
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, BlockedDate]:
        return self._store.state.blocked

    def get_by_id(self, blocked_id: int) -> BlockedDate | None:
        return self._rows.get(blocked_id)

    def get_by_date(self, day: date) -> BlockedDate | None:
        for row in self._rows.values():
            if row.date == day:
                return row
        return None

    def add(self, blocked: BlockedDate) -> BlockedDate:
        if self.get_by_date(blocked.date) is not None:
            raise ValueError(f"Date {blocked.date} already blocked")
        saved = replace(blocked, id=self._store.state.allocate("blocked"))
        self._rows[saved.id] = saved  # type: ignore[index]
        return saved

    def delete(self, blocked_id: int) -> None:
        self._rows.pop(blocked_id, None)

    def list_in_range(self, start: date | None, end: date | None) -> list[BlockedDate]:
        rows = [
            b
            for b in self._rows.values()
            if (start is None or b.date >= start) and (end is None or b.date <= end)
        ]
        return sorted(rows, key=lambda b: b.date)


class InMemoryUnitOfWork:
    """Unit of work over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self._store = store
        self._snapshot: _State | None = None
        self.publications = InMemoryPublicationRepo(store)
        self.blocked_dates = InMemoryBlockedDateRepo(store)
        self.manuscripts = InMemoryManuscriptRepo(store)

    def __enter__(self) -> InMemoryUnitOfWork:
        self._store.lock.acquire()
        self._snapshot = copy.deepcopy(self._store.state)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if self._snapshot is not None:
                self.rollback()
        finally:
            self._store.lock.release()

    def commit(self) -> None:
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            self._store.state = self._snapshot
            self._snapshot = None


def memory_uow_factory(store: InMemoryStore | None = None) -> Any:
    """Return a factory of units of work sharing one store."""
    shared = store or InMemoryStore()

    def factory() -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(shared)

    factory.store = shared  # type: ignore[attr-defined]
    return factory
