#!/usr/bin/env python3
"""
lookup_manager.py
-----------------
Config-driven manager for the name-keyed lookup tables: manufacturers
and set types.

Both tables hold nothing but a unique name. Lookups ignore case, so
"Acme" and "ACME" resolve to the same row; the spelling of the first
insert is kept. Deleting a row detaches the sets that referenced it
(their reference becomes NULL) instead of deleting them.

Usage:
    with db.session_scope():
        acme = db.manufacturers.get_or_create("Acme")
        db.types.delete(old_type.id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import List, Optional, Type

# --- Third party imports ---
from sqlalchemy import update
from sqlalchemy.orm import Session

# --- Local imports ---
from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import SamlaLogger, safe_logger
from samla.core.validators import DataValidator
from samla.database.decorators import DatabaseOperation
from samla.database.models import ItemSet, ItemType, Manufacturer
from .base_manager import BaseManager


@dataclass
class LookupConfig:
    """
    Configuration for a lookup table manager.

    Attributes:
        model_class: SQLAlchemy model class with a unique ``name``
        display_name: Human-readable name for messages and log entries
        set_column: Name of the referencing column on ``sets``
    """

    model_class: Type
    display_name: str
    set_column: str


MANUFACTURER_CONFIG = LookupConfig(Manufacturer, "manufacturer", "manufacturer_id")
TYPE_CONFIG = LookupConfig(ItemType, "type", "type_id")


class NamedLookupManager(BaseManager):
    """Shared CRUD for manufacturers and types."""

    config: LookupConfig

    def __init__(
        self,
        session: Session,
        logger: Optional[SamlaLogger],
        config: LookupConfig,
    ):
        super().__init__(session, logger)
        self.config = config

    def get(self, entity_id: int):
        """Retrieve by id, or None."""
        with DatabaseOperation(self.logger, f"get_{self.config.display_name}"):
            return self.session.get(
                self.config.model_class,
                DataValidator.validate_id(entity_id, f"{self.config.display_name} id"),
            )

    def get_by_name(self, name: str):
        """Retrieve by name, ignoring case."""
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            return None
        with DatabaseOperation(self.logger, f"get_{self.config.display_name}_by_name"):
            return self._find_by_name(self.config.model_class, normalized)

    def get_all(self) -> List:
        """All rows ordered by name."""
        with DatabaseOperation(self.logger, f"get_all_{self.config.display_name}s"):
            model = self.config.model_class
            return self.session.query(model).order_by(model.name).all()

    def get_or_create(self, name: Optional[str]):
        """
        Resolve a name to a row, creating it when missing.

        Returns:
            The row, or None for a blank name
        """
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            return None
        with DatabaseOperation(self.logger, f"get_or_create_{self.config.display_name}"):
            return self._get_or_create_by_name(self.config.model_class, normalized)

    def create(self, name: str):
        """
        Create a row.

        Raises:
            ValidationError: If the name is blank
            DatabaseError: If the name exists (ignoring case)
        """
        normalized = DataValidator.require_string(name, f"{self.config.display_name} name")
        with DatabaseOperation(self.logger, f"create_{self.config.display_name}"):
            if self._find_by_name(self.config.model_class, normalized) is not None:
                raise DatabaseError(
                    f"{self.config.display_name} already exists: {normalized}"
                )
            entity = self.config.model_class(name=normalized)
            self.session.add(entity)
            self.session.flush()
            return entity

    def update(self, entity_id: int, name: str):
        """Rename a row."""
        normalized = DataValidator.require_string(name, f"{self.config.display_name} name")
        entity = self._require(self.config.model_class, entity_id, self.config.display_name)
        with DatabaseOperation(self.logger, f"update_{self.config.display_name}"):
            entity.name = normalized
            self.session.flush()
            return entity

    def delete(self, entity_id: int) -> int:
        """
        Delete a row after detaching the sets that reference it.

        Returns:
            Number of sets whose reference was cleared
        """
        entity = self._require(self.config.model_class, entity_id, self.config.display_name)
        column = getattr(ItemSet, self.config.set_column)

        with DatabaseOperation(self.logger, f"delete_{self.config.display_name}"):
            result = self.session.execute(
                update(ItemSet)
                .where(column == entity.id)
                .values({self.config.set_column: None})
                .execution_options(synchronize_session="fetch")
            )
            self.session.delete(entity)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Deleted {self.config.display_name}: {entity.name}",
                {"id": entity.id, "detached_sets": result.rowcount},
            )
            return result.rowcount


class ManufacturerManager(NamedLookupManager):
    """Manages Manufacturer table operations."""

    def __init__(self, session: Session, logger: Optional[SamlaLogger] = None):
        super().__init__(session, logger, MANUFACTURER_CONFIG)


class TypeManager(NamedLookupManager):
    """Manages ItemType table operations."""

    def __init__(self, session: Session, logger: Optional[SamlaLogger] = None):
        super().__init__(session, logger, TYPE_CONFIG)
