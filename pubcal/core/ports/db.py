"""
Database port interfaces.

Protocol-based interfaces for repository operations.
Implementations: SQLite (adapters/sqlite_db.py), in-memory (adapters/memory.py).

All repositories handed out by a unit of work share its transaction, so reads
observe writes made earlier in the same logical operation.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any, Protocol

from pubcal.core.entities import BlockedDate, Manuscript, Publication

__all__ = [
    "BlockedDateRepoPort",
    "ManuscriptRepoPort",
    "PublicationRepoPort",
    "TransactionConflictError",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
]


class TransactionConflictError(Exception):
    """Raised when the store could not serialize a transaction."""


# -----------------------------------------------------------------------------
# Manuscripts (external, read-mostly)
# -----------------------------------------------------------------------------


class ManuscriptRepoPort(Protocol):
    def get_by_id(self, manuscript_id: int) -> Manuscript | None:
        """Get manuscript by ID."""
        ...

    def get_titles(self, manuscript_ids: Sequence[int]) -> dict[int, str]:
        """Map manuscript IDs to titles (missing IDs are omitted)."""
        ...

    def add(self, title: str) -> Manuscript:
        """Insert a manuscript and return it with its assigned ID."""
        ...


# -----------------------------------------------------------------------------
# Publications
# -----------------------------------------------------------------------------


class PublicationRepoPort(Protocol):
    """
    Repository for publications.

    Invariants:
    - unique (manuscript_id, market)
    """

    def get_by_id(self, publication_id: int) -> Publication | None:
        """Get publication by ID."""
        ...

    def get_for_market(self, manuscript_id: int, market: str) -> Publication | None:
        """Get the publication row for a manuscript x market pair."""
        ...

    def list_for_manuscript(self, manuscript_id: int) -> list[Publication]:
        """List publications of one manuscript, ascending ID."""
        ...

    def list_all(self) -> list[Publication]:
        """List every publication, ascending ID."""
        ...

    def list_scheduled_on(self, day: date) -> list[Publication]:
        """List scheduled publications on a date, ascending ID."""
        ...

    def list_in_range(self, start: date, end: date) -> list[Publication]:
        """List publications whose scheduled_date is within [start, end]."""
        ...

    def count_scheduled_on(self, day: date, exclude_id: int | None = None) -> int:
        """Count scheduled publications on a date."""
        ...

    def add(self, publication: Publication) -> Publication:
        """Insert a publication and return it with its assigned ID."""
        ...

    def update(self, publication: Publication) -> Publication:
        """Persist status/date fields of an existing publication."""
        ...

    def delete(self, publication_id: int) -> None:
        """Delete publication by ID."""
        ...


# -----------------------------------------------------------------------------
# Blocked dates
# -----------------------------------------------------------------------------


class BlockedDateRepoPort(Protocol):
    """
    Repository for blocked dates.

    Invariants:
    - date is unique
    """

    def get_by_id(self, blocked_id: int) -> BlockedDate | None:
        ...

    def get_by_date(self, day: date) -> BlockedDate | None:
        ...

    def add(self, blocked: BlockedDate) -> BlockedDate:
        ...

    def delete(self, blocked_id: int) -> None:
        ...

    def list_in_range(self, start: date | None, end: date | None) -> list[BlockedDate]:
        """List blocked dates ascending by date; None bounds are open."""
        ...


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class UnitOfWorkPort(Protocol):
    """
    One transaction per logical operation.

    Entering begins a serialized write transaction; leaving with an exception
    rolls back. Callers commit explicitly.
    """

    @property
    def publications(self) -> PublicationRepoPort: ...

    @property
    def blocked_dates(self) -> BlockedDateRepoPort: ...

    @property
    def manuscripts(self) -> ManuscriptRepoPort: ...

    def __enter__(self) -> UnitOfWorkPort: ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    def __call__(self) -> UnitOfWorkPort: ...
