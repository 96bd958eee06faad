#!/usr/bin/env python3
"""
set_manager.py
--------------------
Manages item sets, the bags that hold them and their elements.

A set always lives in its own bag: the two are created, moved and
deleted together. Photo columns are not written here; the asset
coordinator (``samla.assets.photo_manager``) owns them.

Key Features:
    - Next free bag serial for a box ("0001", "0002", ...)
    - Bag + set creation in one flush, with manufacturer and type
      get-or-create
    - Set details (location, box, bag, tags, elements) for display
    - Element CRUD with kind validation

Usage:
    with db.session_scope():
        serial = db.sets.next_bag_serial(box.id)
        set_id = db.sets.create_bag_with_set(box.id, serial, "Castle Set", "Acme")
        db.sets.add_element(set_id, "Tower", "stempel")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import List, Optional

# --- Third party imports ---
from sqlalchemy import select

# --- Local imports ---
from samla.core.logging_manager import safe_logger
from samla.core.validators import DataValidator
from samla.database.decorators import DatabaseOperation
from samla.database.models import Bag, Box, Element, ItemSet
from .base_manager import BaseManager
from .lookup_manager import MANUFACTURER_CONFIG, TYPE_CONFIG

FIRST_BAG_SERIAL = "0001"


@dataclass
class SetDetails:
    """
    Flattened view of one set with its placement and contents.

    Optional names are empty strings when unset.
    """

    id: int
    name: str
    manufacturer_id: Optional[int]
    manufacturer_name: str
    type_id: Optional[int]
    type_name: str
    photo_path: str
    photo_source: str
    bag_id: int
    bag_serial: str
    box_id: int
    box_code: str
    box_name: str
    location_id: int
    location_name: str
    location_room: str
    location_shelf: str
    location_compartment: str
    location_note: str
    tags: List[str] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)


class SetManager(BaseManager):
    """Manages ItemSet, Bag and Element table operations."""

    # -------------------------------------------------------------------------
    # Bags
    # -------------------------------------------------------------------------

    def next_bag_serial(self, box_id: int) -> str:
        """
        Next bag serial for a box.

        Takes the highest all-digit serial in the box, adds one and pads
        to four digits. Returns "0001" for an empty box, a box without
        numeric serials or an invalid box id.
        """
        if isinstance(box_id, bool) or not isinstance(box_id, int) or box_id <= 0:
            return FIRST_BAG_SERIAL

        with DatabaseOperation(self.logger, "next_bag_serial"):
            serials = self.session.scalars(
                select(Bag.serial_no).where(Bag.box_id == box_id)
            ).all()

        numbers = [int(serial) for serial in serials if serial.isdigit()]
        if not numbers:
            return FIRST_BAG_SERIAL
        return f"{max(numbers) + 1:04d}"

    # -------------------------------------------------------------------------
    # Sets
    # -------------------------------------------------------------------------

    def _lookup(self, config, name: Optional[str]):
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            return None
        return self._get_or_create_by_name(config.model_class, normalized)

    def get(self, set_id: int) -> Optional[ItemSet]:
        """Retrieve a set by id, or None."""
        with DatabaseOperation(self.logger, "get_set"):
            return self.session.get(ItemSet, DataValidator.validate_id(set_id, "Set id"))

    def create_bag_with_set(
        self,
        box_id: int,
        serial_no: str,
        name: str,
        manufacturer: Optional[str] = None,
        type_name: Optional[str] = None,
    ) -> int:
        """
        Create a bag in a box and the set it holds.

        Args:
            box_id: Box receiving the bag
            serial_no: Bag serial, unique within the box
            name: Set name
            manufacturer: Manufacturer name (created when missing)
            type_name: Type name (created when missing)

        Returns:
            Id of the new set

        Raises:
            ValidationError: If name, serial or box id is missing
            DatabaseError: If the box is missing or the serial is taken
        """
        name = DataValidator.require_string(name, "Set name")
        serial_no = DataValidator.require_string(serial_no, "Bag serial")
        box = self._require(Box, box_id, "Box")

        with DatabaseOperation(self.logger, "create_bag_with_set", details={"box_id": box.id}):
            # Lookups may query; resolve them before building the pending bag
            maker = self._lookup(MANUFACTURER_CONFIG, manufacturer)
            item_type = self._lookup(TYPE_CONFIG, type_name)

            bag = Bag(box=box, serial_no=serial_no)
            item_set = ItemSet(bag=bag, name=name, manufacturer=maker, item_type=item_type)
            self.session.add_all([bag, item_set])
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created set: {name}",
                {"set_id": item_set.id, "bag_id": bag.id, "serial_no": serial_no},
            )
            return item_set.id

    def update(
        self,
        set_id: int,
        name: str,
        manufacturer: Optional[str],
        type_name: Optional[str],
        box_id: int,
        bag_serial: str,
    ) -> ItemSet:
        """
        Update a set and move its bag.

        Blank manufacturer or type names clear the reference.
        """
        name = DataValidator.require_string(name, "Set name")
        bag_serial = DataValidator.require_string(bag_serial, "Bag serial")
        item_set = self._require(ItemSet, set_id, "Set")
        box = self._require(Box, box_id, "Box")

        with DatabaseOperation(self.logger, "update_set", details={"set_id": item_set.id}):
            maker = self._lookup(MANUFACTURER_CONFIG, manufacturer)
            item_type = self._lookup(TYPE_CONFIG, type_name)

            item_set.name = name
            item_set.manufacturer = maker
            item_set.item_type = item_type
            item_set.bag.box = box
            item_set.bag.serial_no = bag_serial
            self.session.flush()
            return item_set

    def delete(self, set_id: int) -> Optional[str]:
        """
        Delete a set together with its bag.

        The photo file is left alone; callers remove it after the
        transaction commits.

        Returns:
            The set's photo path before deletion, or None
        """
        item_set = self._require(ItemSet, set_id, "Set")

        with DatabaseOperation(self.logger, "delete_set", details={"set_id": item_set.id}):
            photo_path = item_set.photo_path or None
            # Deleting the bag cascades to the set, its elements and tags
            self.session.delete(item_set.bag)
            self.session.flush()
            return photo_path

    def get_details(self, set_id: int) -> SetDetails:
        """
        Collect everything shown for one set.

        Raises:
            DatabaseError: If the set does not exist
        """
        item_set = self._require(ItemSet, set_id, "Set")

        with DatabaseOperation(self.logger, "get_set_details"):
            bag = item_set.bag
            box = bag.box
            location = box.location
            return SetDetails(
                id=item_set.id,
                name=item_set.name,
                manufacturer_id=item_set.manufacturer_id,
                manufacturer_name=item_set.manufacturer.name if item_set.manufacturer else "",
                type_id=item_set.type_id,
                type_name=item_set.item_type.name if item_set.item_type else "",
                photo_path=item_set.photo_path or "",
                photo_source=item_set.photo_source or "",
                bag_id=bag.id,
                bag_serial=bag.serial_no,
                box_id=box.id,
                box_code=box.code,
                box_name=box.name or "",
                location_id=location.id,
                location_name=location.name,
                location_room=location.room or "",
                location_shelf=location.shelf or "",
                location_compartment=location.compartment or "",
                location_note=location.note or "",
                tags=sorted(tag.name for tag in item_set.tags),
                elements=list(item_set.elements),
            )

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------

    def list_elements(self, set_id: int) -> List[Element]:
        """Elements of a set in insertion order."""
        set_id = DataValidator.validate_id(set_id, "Set id")
        with DatabaseOperation(self.logger, "list_elements"):
            return (
                self.session.query(Element)
                .filter(Element.set_id == set_id)
                .order_by(Element.id)
                .all()
            )

    def add_element(self, set_id: int, name: str, kind: Optional[str] = None) -> Element:
        """
        Add an element to a set.

        Raises:
            ValidationError: Blank name or unknown kind
            DatabaseError: Missing set
        """
        name = DataValidator.require_string(name, "Element name")
        kind = DataValidator.normalize_element_kind(kind)
        item_set = self._require(ItemSet, set_id, "Set")

        with DatabaseOperation(self.logger, "add_element", details={"set_id": item_set.id}):
            element = Element(item_set=item_set, name=name, kind=kind)
            self.session.add(element)
            self.session.flush()
            return element

    def update_element(self, element_id: int, name: str, kind: Optional[str] = None) -> Element:
        """Rename an element and set its kind."""
        name = DataValidator.require_string(name, "Element name")
        kind = DataValidator.normalize_element_kind(kind)
        element = self._require(Element, element_id, "Element")

        with DatabaseOperation(self.logger, "update_element"):
            element.name = name
            element.kind = kind
            self.session.flush()
            return element

    def delete_element(self, element_id: int) -> None:
        """Delete an element."""
        element = self._require(Element, element_id, "Element")
        with DatabaseOperation(self.logger, "delete_element"):
            self.session.delete(element)
            self.session.flush()

    def require(self, set_id: int) -> ItemSet:
        """
        Retrieve a set or fail.

        Raises:
            ValidationError: If the id is not a positive integer
            DatabaseError: If the set does not exist
        """
        return self._require(ItemSet, set_id, "Set")
