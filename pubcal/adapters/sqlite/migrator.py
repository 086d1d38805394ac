"""
Forward-only schema migrations.

Migration files are `NNNN_name.sql` files in a directory shipped inside the
package. Only the text above a `-- Down` marker is applied. Each file runs
in its own transaction together with its `_migrations` record.
"""

import logging
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"
DOWN_MARKER = "-- Down"


@dataclass(frozen=True)
class Migration:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def up_script(self) -> str:
        up, _, _ = self.path.read_text(encoding="utf-8").partition(DOWN_MARKER)
        return up


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path = DEFAULT_MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def discover(self) -> list[Migration]:
        """Migration files in apply order."""
        if not self.migrations_dir.is_dir():
            raise FileNotFoundError(f"Migrations directory not found: {self.migrations_dir}")
        return [Migration(path) for path in sorted(self.migrations_dir.glob("*.sql"))]

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _applied(self, conn: sqlite3.Connection) -> set[str]:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)
        conn.commit()
        return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}

    def pending(self) -> list[str]:
        """Filenames not yet applied, in apply order."""
        with closing(self._connect()) as conn:
            applied = self._applied(conn)
        return [m.name for m in self.discover() if m.name not in applied]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied."""
        migrations = self.discover()
        applied_now: list[str] = []
        with closing(self._connect()) as conn:
            applied = self._applied(conn)
            for migration in migrations:
                if migration.name in applied:
                    continue
                logger.info("Applying migration: %s", migration.name)
                self._apply(conn, migration)
                applied_now.append(migration.name)

        logger.info("Migrations up to date (%d new)", len(applied_now))
        return applied_now

    def _apply(self, conn: sqlite3.Connection, migration: Migration) -> None:
        try:
            conn.executescript("BEGIN;\n" + migration.up_script())
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (migration.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {migration.name} failed: {e}") from e
