#!/usr/bin/env python3
"""
box_manager.py
--------------------
Manages boxes: labelled containers kept at a storage location.

Box codes are required and unique across the catalog.
"""
from typing import List, Optional

from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import safe_logger
from samla.core.validators import DataValidator
from samla.database.decorators import DatabaseOperation
from samla.database.models import Box, Location
from .base_manager import BaseManager


class BoxManager(BaseManager):
    """Manages Box table operations."""

    def get(self, box_id: int) -> Optional[Box]:
        """Retrieve a box by id, or None."""
        with DatabaseOperation(self.logger, "get_box"):
            return self.session.get(Box, DataValidator.validate_id(box_id, "Box id"))

    def get_by_code(self, code: str) -> Optional[Box]:
        """Retrieve a box by its code."""
        normalized = DataValidator.normalize_string(code)
        if not normalized:
            return None
        with DatabaseOperation(self.logger, "get_box_by_code"):
            return self.session.query(Box).filter(Box.code == normalized).first()

    def get_all(self, location_id: Optional[int] = None) -> List[Box]:
        """
        All boxes ordered by code.

        Args:
            location_id: Restrict to the boxes of one location
        """
        with DatabaseOperation(self.logger, "get_all_boxes"):
            query = self.session.query(Box)
            if location_id is not None:
                query = query.filter(
                    Box.location_id == DataValidator.validate_id(location_id, "Location id")
                )
            return query.order_by(Box.code).all()

    def create(self, location_id: int, code: str, name: Optional[str] = None) -> Box:
        """
        Create a box at a location.

        Raises:
            ValidationError: If the code is blank or the location id invalid
            DatabaseError: If the location is missing or the code is taken
        """
        code = DataValidator.require_string(code, "Box code")
        location = self._require(Location, location_id, "Location")

        with DatabaseOperation(self.logger, "create_box"):
            if self.get_by_code(code) is not None:
                raise DatabaseError(f"Box code already exists: {code}")

            box = Box(location=location, code=code, name=DataValidator.normalize_string(name))
            self.session.add(box)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created box: {code}", {"box_id": box.id, "location_id": location.id}
            )
            return box

    def update(
        self,
        box_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        location_id: Optional[int] = None,
    ) -> Box:
        """
        Update a box. Arguments left as None keep their value; pass an
        empty string as ``name`` to clear it.
        """
        box = self._require(Box, box_id, "Box")

        with DatabaseOperation(self.logger, "update_box"):
            if code is not None:
                code = DataValidator.require_string(code, "Box code")
                other = self.get_by_code(code)
                if other is not None and other.id != box.id:
                    raise DatabaseError(f"Box code already exists: {code}")
                box.code = code
            if name is not None:
                box.name = DataValidator.normalize_string(name)
            if location_id is not None:
                box.location = self._require(Location, location_id, "Location")
            self.session.flush()
            return box

    def delete(self, box_id: int) -> None:
        """Delete a box with its bags, sets and elements."""
        box = self._require(Box, box_id, "Box")
        with DatabaseOperation(self.logger, "delete_box"):
            self.session.delete(box)
            self.session.flush()
