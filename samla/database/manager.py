#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the Samla catalog.

Provides the SamlaDB class for interacting with the SQLite store.
Handles:
    - Initialization of the engine and session factory
    - Schema migration at start-up (versioned ledger, all-or-nothing)
    - Transactional session scopes with automatic rollback
    - Entity managers bound to the active session
    - Catalog search and statistics

Core Operations:
    Store Lifecycle:
        - migrate: Apply pending migrations (run at construction)
        - migration_engine: Inspect the version ledger
        - close: Dispose the engine

    Catalog Management (inside session_scope):
        - db.locations, db.boxes, db.sets, db.tags
        - db.manufacturers, db.types

    Queries:
        - search: Run the search query compiler
        - get_stats: Counts for the overview screen

Notes
==============
- The migration engine owns the schema; ORM models only map it
- Foreign keys are enforced on every connection
- DDL runs inside transactions (see ``engine.create_store_engine``)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from samla.core.exceptions import DatabaseError, MigrationError
from samla.core.logging_manager import SamlaLogger, safe_logger
from .engine import create_store_engine
from .migrations import MIGRATIONS, MigrationEngine
from .models import Box, Element, ItemSet, Location, Tag
from .managers import (
    BoxManager,
    LocationManager,
    ManufacturerManager,
    SetManager,
    TagManager,
    TypeManager,
)

if TYPE_CHECKING:
    from samla.assets.storage import AssetStorage


# ----- Main Database Manager -----
class SamlaDB:
    """
    Main database manager for the Samla catalog store.

    Attributes:
        - db_path (Path): Filesystem path to the SQLite database file.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): SQLAlchemy session factory.
        - logger (SamlaLogger | None): Operation logger.

    Usage:
        db = SamlaDB("~/Samla/Data/samla.db")
        with db.session_scope():
            box = db.boxes.create(location.id, "B1")
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        run_migrations: bool = True,
        logger: Optional[SamlaLogger] = None,
    ) -> None:
        """
        Initialize engine and session factory, then migrate the store.

        Args:
            db_path: Path to the SQLite file (created when missing)
            log_dir: Directory for log files; ignored when ``logger`` is given
            run_migrations: Apply pending migrations now
            logger: Existing logger to use

        Raises:
            MigrationError: If the store cannot be brought to the latest
                schema version
            DatabaseError: If the store cannot be opened
        """
        self.db_path = Path(db_path).expanduser().resolve()

        # --- Logging ---
        if logger is not None:
            self.logger: Optional[SamlaLogger] = logger
        elif log_dir:
            self.logger = SamlaLogger(
                Path(log_dir).expanduser().resolve() / "system",
                component_name="database",
            )
        else:
            self.logger = None

        # Entity managers (bound in session_scope)
        self._location_manager: Optional[LocationManager] = None
        self._box_manager: Optional[BoxManager] = None
        self._set_manager: Optional[SetManager] = None
        self._tag_manager: Optional[TagManager] = None
        self._manufacturer_manager: Optional[ManufacturerManager] = None
        self._type_manager: Optional[TypeManager] = None

        self._setup_engine()

        if run_migrations:
            self.migrate()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        log = safe_logger(self.logger)
        try:
            log.log_operation("database_init_start", {"db_path": str(self.db_path)})

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine: Engine = create_store_engine(self.db_path)
            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
                future=True,
            )
            self.migration_engine = MigrationEngine(
                self.engine, MIGRATIONS, logger=self.logger
            )

            log.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            log.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Migrations ----
    def migrate(self) -> List[int]:
        """
        Apply pending migrations.

        Returns:
            Versions applied (empty when the store was up to date)

        Raises:
            MigrationError: On any failure; nothing is persisted
        """
        applied = self.migration_engine.migrate()
        if applied:
            safe_logger(self.logger).log_info(
                "Store migrated",
                {"applied": applied, "version": self.migration_engine.latest_version},
            )
        return applied

    def schema_version(self) -> int:
        """Current ledger version."""
        return self.migration_engine.current_version()

    def ensure_current(self) -> None:
        """
        Fail unless the store is at the latest schema version.

        Raises:
            MigrationError: If migrations are pending
        """
        current = self.schema_version()
        if current != self.migration_engine.latest_version:
            raise MigrationError(
                f"Store is at version {current}, expected "
                f"{self.migration_engine.latest_version}; run migrations first"
            )

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Binds the entity managers to the session for the duration of the
        scope. Commits on success; rolls back and re-raises on any error.

        Usage:
            with db.session_scope() as session:
                tag = db.tags.get_or_create("castle")
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log = safe_logger(self.logger)

        self._location_manager = LocationManager(session, self.logger)
        self._box_manager = BoxManager(session, self.logger)
        self._set_manager = SetManager(session, self.logger)
        self._tag_manager = TagManager(session, self.logger)
        self._manufacturer_manager = ManufacturerManager(session, self.logger)
        self._type_manager = TypeManager(session, self.logger)

        log.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            log.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            log.log_error(e, {"operation": "session_rollback", "session_id": session_id})
            raise
        finally:
            self._location_manager = None
            self._box_manager = None
            self._set_manager = None
            self._tag_manager = None
            self._manufacturer_manager = None
            self._type_manager = None

            session.close()
            log.log_debug("session_close", {"session_id": session_id})

    # -------------------------------------------------------------------------
    # Entity Manager Properties
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_manager(manager: Any, name: str) -> Any:
        if manager is None:
            raise DatabaseError(
                f"{name} requires active session. "
                "Use within session_scope: "
                "with db.session_scope() as session: ..."
            )
        return manager

    @property
    def locations(self) -> LocationManager:
        """
        Access LocationManager for storage location operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._location_manager, "LocationManager")

    @property
    def boxes(self) -> BoxManager:
        """
        Access BoxManager for box operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._box_manager, "BoxManager")

    @property
    def sets(self) -> SetManager:
        """
        Access SetManager for set, bag and element operations.

        Recommended usage:
            with db.session_scope():
                set_id = db.sets.create_bag_with_set(box_id, "0001", "Castle Set")

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._set_manager, "SetManager")

    @property
    def tags(self) -> TagManager:
        """
        Access TagManager for tag operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._tag_manager, "TagManager")

    @property
    def manufacturers(self) -> ManufacturerManager:
        """
        Access ManufacturerManager.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._manufacturer_manager, "ManufacturerManager")

    @property
    def types(self) -> TypeManager:
        """
        Access TypeManager.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        return self._require_manager(self._type_manager, "TypeManager")

    # ---- Queries ----
    def search(self, query: str, sort_key: Any = None) -> List[Any]:
        """
        Search the catalog.

        Args:
            query: Raw query, optionally starting with a filter prefix
                such as ``@box`` or ``@tag``
            sort_key: 'name' (default), 'box', 'location' or 'added'

        Returns:
            List of SearchResult, at most 200
        """
        from samla.search.search_engine import SearchEngine

        with self.session_scope() as session:
            return SearchEngine(session, self.logger).search(query, sort_key)

    def get_stats(self, storage: Optional[AssetStorage] = None) -> Dict[str, int]:
        """
        Count the main catalog objects.

        Args:
            storage: When given, also count the image files under its
                asset root

        Returns:
            Dict with sets, products, boxes, locations, tags and images
        """
        with self.session_scope() as session:
            stats = {
                "sets": session.scalar(select(func.count()).select_from(ItemSet)),
                "products": session.scalar(select(func.count()).select_from(Element)),
                "boxes": session.scalar(select(func.count()).select_from(Box)),
                "locations": session.scalar(select(func.count()).select_from(Location)),
                "tags": session.scalar(select(func.count()).select_from(Tag)),
                "images": 0,
            }

        if storage is not None:
            stats["images"] = storage.count_files()

        return stats

    # ---- Teardown ----
    def close(self) -> None:
        """Dispose the engine and release pooled connections."""
        self.engine.dispose()
        safe_logger(self.logger).log_debug("database_closed", {"db_path": str(self.db_path)})
