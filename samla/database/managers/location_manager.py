#!/usr/bin/env python3
"""
location_manager.py
--------------------
Manages storage locations.

A location is the root of the containment tree: deleting it removes its
boxes, their bags, the sets in those bags and the sets' elements.

Usage:
    with db.session_scope():
        shelf = db.locations.create({"name": "Cellar", "room": "Basement"})
        db.locations.update(shelf.id, {"shelf": "2"})
"""
from typing import Any, Dict, List, Optional

from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import safe_logger
from samla.core.validators import DataValidator
from samla.database.decorators import DatabaseOperation
from samla.database.models import Location
from .base_manager import BaseManager

OPTIONAL_FIELDS = ("room", "shelf", "compartment", "note")


class LocationManager(BaseManager):
    """Manages Location table operations."""

    def get(self, location_id: int) -> Optional[Location]:
        """Retrieve a location by id, or None."""
        with DatabaseOperation(self.logger, "get_location"):
            return self.session.get(Location, DataValidator.validate_id(location_id, "Location id"))

    def get_by_name(self, name: str) -> Optional[Location]:
        """Retrieve a location by its exact friendly name."""
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            return None
        with DatabaseOperation(self.logger, "get_location_by_name"):
            return self._find_by_name(Location, normalized, case_insensitive=False)

    def get_all(self) -> List[Location]:
        """All locations ordered by name."""
        with DatabaseOperation(self.logger, "get_all_locations"):
            return self.session.query(Location).order_by(Location.name).all()

    def create(self, metadata: Dict[str, Any]) -> Location:
        """
        Create a location.

        Args:
            metadata: Dictionary with keys:
                - name (required): Friendly name, unique
                - room, shelf, compartment, note (optional)

        Returns:
            Created Location

        Raises:
            ValidationError: If the name is blank
            DatabaseError: If the name is already taken
        """
        name = DataValidator.require_string(metadata.get("name"), "Location name")

        with DatabaseOperation(self.logger, "create_location"):
            if self._find_by_name(Location, name, case_insensitive=False):
                raise DatabaseError(f"Location already exists: {name}")

            location = Location(name=name)
            self._update_scalar_fields(location, metadata, OPTIONAL_FIELDS)
            self.session.add(location)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created location: {name}", {"location_id": location.id}
            )
            return location

    def update(self, location_id: int, metadata: Dict[str, Any]) -> Location:
        """
        Update a location's name and optional fields.

        Only keys present in ``metadata`` are changed.
        """
        location = self._require(Location, location_id, "Location")
        if "name" in metadata:
            name = DataValidator.require_string(metadata["name"], "Location name")
        else:
            name = location.name

        with DatabaseOperation(self.logger, "update_location"):
            location.name = name
            self._update_scalar_fields(location, metadata, OPTIONAL_FIELDS)
            self.session.flush()
            return location

    def delete(self, location_id: int) -> None:
        """
        Delete a location with everything stored in it.

        Photos of the removed sets are not touched here; callers that own
        an asset root clean them up (see PhotoManager).
        """
        location = self._require(Location, location_id, "Location")
        with DatabaseOperation(self.logger, "delete_location"):
            self.session.delete(location)
            self.session.flush()
