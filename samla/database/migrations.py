#!/usr/bin/env python3
"""
migrations.py
--------------------
Versioned, forward-only schema migrations for the Samla store.

The schema is defined by an ordered tuple of migrations. Each one carries
a version number and the DDL/DML statements that bring the store from the
previous version to it. Applied versions are recorded in the
``schema_migrations`` ledger; the current version is the highest recorded
one, or 0 for an empty store.

Every pending migration is applied inside one transaction together with
its ledger row. Any failure rolls the whole batch back, so the store is
either fully migrated or left exactly as it was.

Shipped migrations must never be edited: a mistake is fixed by appending
a new migration.

Usage:
    engine = create_store_engine(db_path)
    applied = MigrationEngine(engine, logger=logger).migrate()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

# --- Third party imports ---
from sqlalchemy import Engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError

# --- Local imports ---
from samla.core.exceptions import MigrationError
from samla.core.logging_manager import SamlaLogger, safe_logger

LEDGER_TABLE = "schema_migrations"

LEDGER_DDL = """CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    applied_at TEXT DEFAULT CURRENT_TIMESTAMP
);"""


@dataclass(frozen=True)
class Migration:
    """
    A single schema version.

    Attributes:
        version: Target version (1-based, gapless)
        description: Short human-readable summary
        statements: SQL statements executed in order
    """

    version: int
    description: str
    statements: Tuple[str, ...]


MIGRATIONS: Tuple[Migration, ...] = (
    Migration(
        version=1,
        description="Catalog schema",
        statements=(
            LEDGER_DDL,
            """CREATE TABLE IF NOT EXISTS manufacturers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE
            );""",
            """CREATE TABLE IF NOT EXISTS storage_locations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                friendly_name TEXT NOT NULL UNIQUE,
                note TEXT
            );""",
            """CREATE TABLE IF NOT EXISTS boxes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location_id INTEGER NOT NULL REFERENCES storage_locations(id) ON DELETE CASCADE,
                code TEXT NOT NULL UNIQUE,
                name TEXT,
                CHECK (length(trim(code)) > 0)
            );""",
            """CREATE TABLE IF NOT EXISTS bags (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                box_id INTEGER NOT NULL REFERENCES boxes(id) ON DELETE CASCADE,
                serial_no TEXT NOT NULL,
                UNIQUE (box_id, serial_no),
                CHECK (length(trim(serial_no)) > 0)
            );""",
            """CREATE TABLE IF NOT EXISTS sets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                bag_id INTEGER NOT NULL UNIQUE REFERENCES bags(id) ON DELETE CASCADE,
                manufacturer_id INTEGER REFERENCES manufacturers(id) ON DELETE SET NULL,
                name TEXT NOT NULL,
                photo_path TEXT,
                photo_source TEXT,
                CHECK (length(trim(name)) > 0)
            );""",
            """CREATE TABLE IF NOT EXISTS elements (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                set_id INTEGER NOT NULL REFERENCES sets(id) ON DELETE CASCADE,
                name TEXT NOT NULL,
                kind TEXT,
                CHECK (length(trim(name)) > 0),
                CHECK (kind IN ('stempel','stanze') OR kind IS NULL OR length(kind)=0)
            );""",
            """CREATE TABLE IF NOT EXISTS tags (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                CHECK (length(trim(name)) > 0)
            );""",
            """CREATE TABLE IF NOT EXISTS set_tags (
                set_id INTEGER NOT NULL REFERENCES sets(id) ON DELETE CASCADE,
                tag_id INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
                PRIMARY KEY (set_id, tag_id)
            );""",
            "CREATE INDEX IF NOT EXISTS idx_sets_name ON sets(name);",
            "CREATE INDEX IF NOT EXISTS idx_boxes_code ON boxes(code);",
            "CREATE INDEX IF NOT EXISTS idx_boxes_name ON boxes(name);",
            "CREATE INDEX IF NOT EXISTS idx_bags_serial ON bags(serial_no);",
            "CREATE INDEX IF NOT EXISTS idx_elements_name ON elements(name);",
            "CREATE INDEX IF NOT EXISTS idx_tags_name ON tags(name);",
            "CREATE INDEX IF NOT EXISTS idx_set_tags_set_id ON set_tags(set_id);",
        ),
    ),
    Migration(
        version=2,
        description="Set types",
        statements=(
            """CREATE TABLE IF NOT EXISTS types (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                CHECK (length(trim(name)) > 0)
            );""",
            "ALTER TABLE sets ADD COLUMN type_id INTEGER REFERENCES types(id) ON DELETE SET NULL;",
            "CREATE INDEX IF NOT EXISTS idx_types_name ON types(name);",
        ),
    ),
    Migration(
        version=3,
        description="Location room, shelf and compartment",
        statements=(
            "ALTER TABLE storage_locations ADD COLUMN room TEXT;",
            "ALTER TABLE storage_locations ADD COLUMN shelf TEXT;",
            "ALTER TABLE storage_locations ADD COLUMN compartment TEXT;",
        ),
    ),
)


def validate_migrations(migrations: Sequence[Migration]) -> None:
    """
    Check that versions run 1, 2, ..., N without gaps or reordering.

    Raises:
        MigrationError: If the sequence is malformed or a migration is empty
    """
    for expected, migration in enumerate(migrations, start=1):
        if migration.version != expected:
            raise MigrationError(
                f"Migration versions must be gapless and increasing: "
                f"expected {expected}, found {migration.version}"
            )
        if not migration.statements:
            raise MigrationError(f"Migration {migration.version} has no statements")


class MigrationEngine:
    """
    Applies pending migrations to a store.

    Attributes:
        engine: SQLAlchemy engine (see ``create_store_engine``)
        migrations: Ordered migration definitions
        logger: Optional logger
    """

    def __init__(
        self,
        engine: Engine,
        migrations: Sequence[Migration] = MIGRATIONS,
        logger: Optional[SamlaLogger] = None,
    ) -> None:
        validate_migrations(migrations)
        self.engine = engine
        self.migrations: Tuple[Migration, ...] = tuple(migrations)
        self.logger = logger

    @property
    def latest_version(self) -> int:
        """Version the store reaches after a successful migrate()."""
        return self.migrations[-1].version if self.migrations else 0

    def current_version(self) -> int:
        """
        Read the store's version from the ledger.

        Returns:
            Highest applied version, 0 when the ledger does not exist yet

        Raises:
            MigrationError: If the ledger cannot be read
        """
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(LEDGER_TABLE):
                    return 0
                return conn.execute(
                    text("SELECT IFNULL(MAX(version), 0) FROM schema_migrations")
                ).scalar_one()
        except SQLAlchemyError as e:
            raise MigrationError(f"Cannot read migration version: {e}") from e

    def pending(self, current: Optional[int] = None) -> List[Migration]:
        """Migrations newer than ``current`` (default: the store's version)."""
        if current is None:
            current = self.current_version()
        return [m for m in self.migrations if m.version > current]

    def history(self) -> List[Tuple[int, Optional[str]]]:
        """
        Applied migrations, oldest first.

        Returns:
            List of (version, applied_at) tuples; empty for a fresh store
        """
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(LEDGER_TABLE):
                    return []
                rows = conn.execute(
                    text("SELECT version, applied_at FROM schema_migrations ORDER BY version")
                ).all()
        except SQLAlchemyError as e:
            raise MigrationError(f"Cannot read migration history: {e}") from e
        return [(row.version, row.applied_at) for row in rows]

    def migrate(self) -> List[int]:
        """
        Bring the store to ``latest_version``.

        Ensures the ledger exists, reads the current version and applies
        every newer migration in ascending order, recording each in the
        ledger. All of it runs in a single transaction.

        Returns:
            Versions applied by this call (empty when already up to date)

        Raises:
            MigrationError: If any statement or the ledger access fails
                (nothing is persisted), or if the store was written by a
                newer build
        """
        log = safe_logger(self.logger)
        applied: List[int] = []

        try:
            with self.engine.begin() as conn:
                conn.exec_driver_sql(LEDGER_DDL)
                current = conn.execute(
                    text("SELECT IFNULL(MAX(version), 0) FROM schema_migrations")
                ).scalar_one()

                if current > self.latest_version:
                    raise MigrationError(
                        f"Store is at version {current}, newer than this build "
                        f"({self.latest_version})"
                    )

                for migration in self.pending(current):
                    for statement in migration.statements:
                        try:
                            conn.exec_driver_sql(statement)
                        except SQLAlchemyError as e:
                            raise MigrationError(
                                f"Migration {migration.version} failed: {e}"
                            ) from e

                    conn.execute(
                        text("INSERT INTO schema_migrations(version) VALUES (:version)"),
                        {"version": migration.version},
                    )
                    applied.append(migration.version)
                    log.log_debug(
                        f"Applied migration {migration.version}",
                        {"description": migration.description},
                    )
        except MigrationError as e:
            log.log_error(e, {"operation": "migrate"})
            raise
        except SQLAlchemyError as e:
            log.log_error(e, {"operation": "migrate"})
            raise MigrationError(f"Migration failed: {e}") from e

        if applied:
            log.log_operation(
                "migrate",
                {"from_version": applied[0] - 1, "to_version": applied[-1]},
            )
        else:
            log.log_debug("Store is up to date", {"version": self.latest_version})

        return applied
