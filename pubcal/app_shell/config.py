import logging
import os
from pathlib import Path

from pubcal.adapters.sqlite.migrator import DEFAULT_MIGRATIONS_DIR, SQLiteMigrator
from pubcal.rules.models import Rules

logger = logging.getLogger(__name__)


class Settings:
    """Process settings read from the environment."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("PUBCAL_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "pubcal.db")
        self.rules_path = Path(
            os.environ.get("PUBCAL_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = Path(
            os.environ.get("PUBCAL_MIGRATIONS_DIR", str(DEFAULT_MIGRATIONS_DIR))
        )


def prepare_database(settings: Settings) -> list[str]:
    """
    Create the data directory and apply pending migrations.
    Returns the migration filenames applied.
    """
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()


def pending_migrations(settings: Settings) -> list[str]:
    """Migration filenames not yet applied to the configured database."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return SQLiteMigrator(settings.db_path, settings.migrations_dir).pending()


def validate_rules(rules: Rules) -> None:
    """
    Validate cross-field requirements pydantic cannot express per field.
    Raises ValueError on the first violation.
    """
    if rules.scheduling.horizon_days < rules.scheduling.max_past_start_days:
        raise ValueError(
            "scheduling.horizon_days must be at least scheduling.max_past_start_days"
        )
    for code in rules.markets:
        if not code.strip() or code != code.strip():
            raise ValueError(f"Invalid market code: {code!r}")

    logger.info(
        "Rules validated: capacity %d/day, %d markets",
        rules.scheduling.daily_capacity,
        len(rules.markets),
    )
