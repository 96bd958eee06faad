#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing the helpers shared by all catalog managers.

Key Features:
    - Session and optional logger handling
    - Lookup by id with a consistent "not found" error
    - Case-insensitive get-or-create for name-keyed lookup tables
    - Scalar field updates with normalization

Usage:
    class BoxManager(BaseManager):
        def create(self, location_id: int, code: str) -> Box:
            with DatabaseOperation(self.logger, "create_box"):
                location = self._require(Location, location_id, "Location")
                ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Any, Callable, Dict, Iterable, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

# --- Local imports ---
from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import SamlaLogger, safe_logger
from samla.core.validators import DataValidator

T = TypeVar("T")


class BaseManager(ABC):
    """
    Abstract base manager for catalog entities.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[SamlaLogger] = None):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _require(self, model_class: Type[T], entity_id: Any, label: str) -> T:
        """
        Load an entity by id or fail.

        Args:
            model_class: ORM model class
            entity_id: Primary key (validated as a positive integer)
            label: Display name for error messages

        Raises:
            ValidationError: If the id is not a positive integer
            DatabaseError: If no row has that id
        """
        entity_id = DataValidator.validate_id(entity_id, f"{label} id")
        entity = self.session.get(model_class, entity_id)
        if entity is None:
            raise DatabaseError(f"{label} not found with id: {entity_id}")
        return entity

    def _find_by_name(
        self, model_class: Type[T], name: str, case_insensitive: bool = True
    ) -> Optional[T]:
        """Find an entity by its ``name`` column."""
        column = model_class.name  # type: ignore[attr-defined]
        query = self.session.query(model_class)
        if case_insensitive:
            query = query.filter(func.lower(column) == name.lower())
        else:
            query = query.filter(column == name)
        return query.first()

    def _get_or_create_by_name(
        self, model_class: Type[T], name: str, case_insensitive: bool = True
    ) -> T:
        """
        Get an entity by name or create it.

        Handles a concurrent insert of the same name by re-reading after
        the integrity error.

        Args:
            model_class: ORM model class with a unique ``name`` column
            name: Already normalized name
            case_insensitive: Match existing names ignoring case

        Returns:
            Existing or newly created entity
        """
        existing = self._find_by_name(model_class, name, case_insensitive)
        if existing is not None:
            return existing

        entity = model_class(name=name)  # type: ignore[call-arg]
        try:
            with self.session.begin_nested():
                self.session.add(entity)
                self.session.flush()
        except IntegrityError:
            existing = self._find_by_name(model_class, name, case_insensitive)
            if existing is not None:
                return existing
            raise DatabaseError(
                f"Failed to create {model_class.__name__} '{name}' "
                "even after handling race condition"
            )

        safe_logger(self.logger).log_debug(
            f"Created {model_class.__name__}: {name}",
            {"id": entity.id},  # type: ignore[attr-defined]
        )
        return entity

    def _update_scalar_fields(
        self,
        entity: Any,
        metadata: Dict[str, Any],
        field_names: Iterable[str],
        normalizer: Callable[[Any], Any] = DataValidator.normalize_string,
    ) -> None:
        """
        Copy the given fields from ``metadata`` onto ``entity``.

        Only keys present in ``metadata`` are touched; blank strings clear
        the field.
        """
        for field_name in field_names:
            if field_name in metadata:
                setattr(entity, field_name, normalizer(metadata[field_name]))
