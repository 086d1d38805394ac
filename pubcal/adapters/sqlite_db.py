"""
SQLite Database Adapter.

Implements the DB port interfaces using SQLite.
Designed to be Postgres-compatible (uses standard SQL patterns).

Write transactions start with BEGIN IMMEDIATE, which takes the database
write lock up-front: concurrent scheduling/blocking operations are
serialized, so capacity counts read inside a transaction cannot go stale.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from pubcal.core.entities import BlockedDate, Manuscript, Publication, utc_now
from pubcal.core.ports.db import TransactionConflictError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_date(s: str | None) -> date | None:
    """Parse ISO date string."""
    return date.fromisoformat(s) if s else None


def format_date(d: date | None) -> str | None:
    return d.isoformat() if d else None


def is_lock_error(exc: sqlite3.OperationalError) -> bool:
    """Whether an OperationalError means another writer holds the lock."""
    message = str(exc).lower()
    return "locked" in message or "busy" in message


def connect(db_path: str, timeout: float = 5.0) -> sqlite3.Connection:
    # isolation_level=None: transactions are managed explicitly
    conn = sqlite3.connect(db_path, timeout=timeout, isolation_level=None)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn
        return connect(self.db_path)

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Manuscript Repository
# -----------------------------------------------------------------------------


class SQLiteManuscriptRepo(SQLiteRepoBase):
    """SQLite implementation of ManuscriptRepoPort."""

    def get_by_id(self, manuscript_id: int) -> Manuscript | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT id, title FROM manuscripts WHERE id = ?", (manuscript_id,)
            ).fetchone()
            return Manuscript(id=row["id"], title=row["title"]) if row else None
        finally:
            if self._should_close():
                conn.close()

    def get_titles(self, manuscript_ids: Sequence[int]) -> dict[int, str]:
        ids = sorted(set(manuscript_ids))
        if not ids:
            return {}
        conn = self._get_conn()
        try:
            placeholders = ", ".join("?" for _ in ids)
            rows = conn.execute(
                f"SELECT id, title FROM manuscripts WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
            return {r["id"]: r["title"] for r in rows}
        finally:
            if self._should_close():
                conn.close()

    def add(self, title: str) -> Manuscript:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT INTO manuscripts (title, created_at) VALUES (?, ?)",
                (title, utc_now().isoformat()),
            )
            manuscript_id = cur.lastrowid
            assert manuscript_id is not None
            return Manuscript(id=manuscript_id, title=title)
        finally:
            if self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# Publication Repository
# -----------------------------------------------------------------------------


class SQLitePublicationRepo(SQLiteRepoBase):
    """SQLite implementation of PublicationRepoPort."""

    def get_by_id(self, publication_id: int) -> Publication | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM publications WHERE id = ?", (publication_id,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def get_for_market(self, manuscript_id: int, market: str) -> Publication | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM publications WHERE manuscript_id = ? AND market = ?",
                (manuscript_id, market),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def list_for_manuscript(self, manuscript_id: int) -> list[Publication]:
        return self._list(
            "SELECT * FROM publications WHERE manuscript_id = ? ORDER BY id ASC",
            (manuscript_id,),
        )

    def list_all(self) -> list[Publication]:
        return self._list("SELECT * FROM publications ORDER BY id ASC", ())

    def list_scheduled_on(self, day: date) -> list[Publication]:
        return self._list(
            """
            SELECT * FROM publications
            WHERE status = 'scheduled' AND scheduled_date = ?
            ORDER BY id ASC
            """,
            (day.isoformat(),),
        )

    def list_in_range(self, start: date, end: date) -> list[Publication]:
        return self._list(
            """
            SELECT * FROM publications
            WHERE scheduled_date >= ? AND scheduled_date <= ?
            ORDER BY scheduled_date ASC, id ASC
            """,
            (start.isoformat(), end.isoformat()),
        )

    def count_scheduled_on(self, day: date, exclude_id: int | None = None) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                """
                SELECT COUNT(*) AS n FROM publications
                WHERE status = 'scheduled' AND scheduled_date = ?
                  AND (? IS NULL OR id != ?)
                """,
                (day.isoformat(), exclude_id, exclude_id),
            ).fetchone()
            return int(row["n"])
        finally:
            if self._should_close():
                conn.close()

    def add(self, publication: Publication) -> Publication:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                INSERT INTO publications (
                    manuscript_id, market, status, scheduled_date, published_date,
                    kdp_url, notes, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    publication.manuscript_id,
                    publication.market,
                    publication.status,
                    format_date(publication.scheduled_date),
                    format_date(publication.published_date),
                    publication.kdp_url,
                    publication.notes,
                    publication.created_at.isoformat(),
                    publication.updated_at.isoformat(),
                ),
            )
            publication.id = cur.lastrowid
            return publication
        finally:
            if self._should_close():
                conn.close()

    def update(self, publication: Publication) -> Publication:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                UPDATE publications SET
                    status = ?, scheduled_date = ?, published_date = ?,
                    kdp_url = ?, notes = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    publication.status,
                    format_date(publication.scheduled_date),
                    format_date(publication.published_date),
                    publication.kdp_url,
                    publication.notes,
                    publication.updated_at.isoformat(),
                    publication.id,
                ),
            )
            return publication
        finally:
            if self._should_close():
                conn.close()

    def delete(self, publication_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM publications WHERE id = ?", (publication_id,))
        finally:
            if self._should_close():
                conn.close()

    def _list(self, sql: str, params: tuple[Any, ...]) -> list[Publication]:
        conn = self._get_conn()
        try:
            rows = conn.execute(sql, params).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> Publication:
        return Publication(
            id=row["id"],
            manuscript_id=row["manuscript_id"],
            market=row["market"],
            status=row["status"],
            scheduled_date=parse_date(row["scheduled_date"]),
            published_date=parse_date(row["published_date"]),
            kdp_url=row["kdp_url"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# BlockedDate Repository
# -----------------------------------------------------------------------------


class SQLiteBlockedDateRepo(SQLiteRepoBase):
    """SQLite implementation of BlockedDateRepoPort."""

    def get_by_id(self, blocked_id: int) -> BlockedDate | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM blocked_dates WHERE id = ?", (blocked_id,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def get_by_date(self, day: date) -> BlockedDate | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM blocked_dates WHERE date = ?", (day.isoformat(),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            if self._should_close():
                conn.close()

    def add(self, blocked: BlockedDate) -> BlockedDate:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT INTO blocked_dates (date, reason, created_at) VALUES (?, ?, ?)",
                (blocked.date.isoformat(), blocked.reason, blocked.created_at.isoformat()),
            )
            return BlockedDate(
                id=cur.lastrowid,
                date=blocked.date,
                reason=blocked.reason,
                created_at=blocked.created_at,
            )
        finally:
            if self._should_close():
                conn.close()

    def delete(self, blocked_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM blocked_dates WHERE id = ?", (blocked_id,))
        finally:
            if self._should_close():
                conn.close()

    def list_in_range(self, start: date | None, end: date | None) -> list[BlockedDate]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM blocked_dates
                WHERE (? IS NULL OR date >= ?) AND (? IS NULL OR date <= ?)
                ORDER BY date ASC
                """,
                (
                    format_date(start),
                    format_date(start),
                    format_date(end),
                    format_date(end),
                ),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            if self._should_close():
                conn.close()

    def _map_row(self, row: dict[str, Any]) -> BlockedDate:
        return BlockedDate(
            id=row["id"],
            date=date.fromisoformat(row["date"]),
            reason=row["reason"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    Provides transaction management and access to all repositories.
    Uses a shared connection for all operations within a transaction.
    """

    def __init__(self, db_path: str, busy_timeout_seconds: float = 5.0):
        self.db_path = db_path
        self.busy_timeout_seconds = busy_timeout_seconds
        self._conn: sqlite3.Connection | None = None

        # Lazy-initialized repositories
        self._publications: SQLitePublicationRepo | None = None
        self._blocked_dates: SQLiteBlockedDateRepo | None = None
        self._manuscripts: SQLiteManuscriptRepo | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        self._conn = connect(self.db_path, timeout=self.busy_timeout_seconds)
        try:
            self._conn.execute("BEGIN IMMEDIATE")
        except sqlite3.OperationalError as e:
            self._conn.close()
            self._conn = None
            if is_lock_error(e):
                logger.debug("Write lock busy on %s: %s", self.db_path, e)
                raise TransactionConflictError(f"Could not acquire write lock: {e}") from e
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._conn is not None:
            if self._conn.in_transaction:
                self.rollback()
            self._conn.close()
            self._conn = None
        self._publications = None
        self._blocked_dates = None
        self._manuscripts = None

    def commit(self) -> None:
        if self._conn is None or not self._conn.in_transaction:
            return
        try:
            self._conn.execute("COMMIT")
        except sqlite3.OperationalError as e:
            if is_lock_error(e):
                raise TransactionConflictError(f"Commit failed: {e}") from e
            raise

    def rollback(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Unit of work used outside of a 'with' block")
        return self._conn

    @property
    def publications(self) -> SQLitePublicationRepo:
        if self._publications is None:
            self._publications = SQLitePublicationRepo(self.db_path, self._require_conn())
        return self._publications

    @property
    def blocked_dates(self) -> SQLiteBlockedDateRepo:
        if self._blocked_dates is None:
            self._blocked_dates = SQLiteBlockedDateRepo(self.db_path, self._require_conn())
        return self._blocked_dates

    @property
    def manuscripts(self) -> SQLiteManuscriptRepo:
        if self._manuscripts is None:
            self._manuscripts = SQLiteManuscriptRepo(self.db_path, self._require_conn())
        return self._manuscripts


def sqlite_uow_factory(db_path: str, busy_timeout_seconds: float = 5.0) -> Any:
    """Return a zero-argument factory producing fresh units of work."""

    def factory() -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(db_path, busy_timeout_seconds)

    return factory
