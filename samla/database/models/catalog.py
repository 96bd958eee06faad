"""
Catalog Models
---------------

The physical containment hierarchy and the item sets stored in it.

Models:
    - Location: A storage place (friendly name, room, shelf, compartment)
    - Box: A labelled box kept at a location
    - Bag: A numbered bag inside a box
    - ItemSet: The catalogued set, housed in exactly one bag
    - Element: A component of an item set
    - Manufacturer: Optional maker of a set
    - ItemType: Optional category of a set
    - Tag: Lower-case keyword attached to sets

Containment is strict: Location → Box → Bag → ItemSet → Element. Deleting
a parent removes everything below it (ON DELETE CASCADE). Deleting a
Manufacturer or ItemType only clears the reference on its sets
(ON DELETE SET NULL).
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List, Optional

# --- Third party imports ---
from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import set_tags
from .base import Base


class Location(Base):
    """
    A place where boxes are stored.

    Attributes:
        id: Primary key
        name: Friendly name shown in the catalog (column ``friendly_name``)
        room: Optional room
        shelf: Optional shelf
        compartment: Optional compartment
        note: Free-form note

    Relationships:
        boxes: One-to-many with Box (cascade delete)
    """

    __tablename__ = "storage_locations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("friendly_name", Text, nullable=False, unique=True)
    room: Mapped[Optional[str]] = mapped_column(Text)
    shelf: Mapped[Optional[str]] = mapped_column(Text)
    compartment: Mapped[Optional[str]] = mapped_column(Text)
    note: Mapped[Optional[str]] = mapped_column(Text)

    boxes: Mapped[List["Box"]] = relationship(
        back_populates="location",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Box.code",
    )

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}')>"


class Box(Base):
    """
    A box at a location, identified by a unique code.

    Relationships:
        location: Many-to-one with Location
        bags: One-to-many with Bag (cascade delete)
    """

    __tablename__ = "boxes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    location_id: Mapped[int] = mapped_column(
        ForeignKey("storage_locations.id", ondelete="CASCADE"), nullable=False
    )
    code: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(Text)

    location: Mapped[Location] = relationship(back_populates="boxes")
    bags: Mapped[List["Bag"]] = relationship(
        back_populates="box",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Bag.serial_no",
    )

    def __repr__(self) -> str:
        return f"<Box(id={self.id}, code='{self.code}')>"


class Bag(Base):
    """
    A bag inside a box; the serial number is unique within its box.

    Relationships:
        box: Many-to-one with Box
        item_set: One-to-one with ItemSet (cascade delete)
    """

    __tablename__ = "bags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    box_id: Mapped[int] = mapped_column(
        ForeignKey("boxes.id", ondelete="CASCADE"), nullable=False
    )
    serial_no: Mapped[str] = mapped_column(Text, nullable=False)

    box: Mapped[Box] = relationship(back_populates="bags")
    item_set: Mapped[Optional["ItemSet"]] = relationship(
        back_populates="bag",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Bag(id={self.id}, box_id={self.box_id}, serial_no='{self.serial_no}')>"


class Manufacturer(Base):
    """Maker of item sets. Deleting one detaches its sets."""

    __tablename__ = "manufacturers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    sets: Mapped[List["ItemSet"]] = relationship(
        back_populates="manufacturer", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Manufacturer(id={self.id}, name='{self.name}')>"


class ItemType(Base):
    """Category of item sets. Deleting one detaches its sets."""

    __tablename__ = "types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    sets: Mapped[List["ItemSet"]] = relationship(
        back_populates="item_type", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<ItemType(id={self.id}, name='{self.name}')>"


class Tag(Base):
    """
    Keyword tag for item sets.

    Names are stored trimmed and lower-cased and never contain commas
    (the search query concatenates them with commas).
    """

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    sets: Mapped[List["ItemSet"]] = relationship(
        secondary=set_tags, back_populates="tags", passive_deletes=True
    )

    @property
    def usage_count(self) -> int:
        """Number of sets carrying this tag."""
        return len(self.sets)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"


class ItemSet(Base):
    """
    The central catalog object: a named set housed in exactly one bag.

    Attributes:
        id: Primary key
        bag_id: Owning bag (unique, one set per bag)
        manufacturer_id: Optional manufacturer (SET NULL on delete)
        type_id: Optional type (SET NULL on delete)
        name: Set name
        photo_path: Path of the photo relative to the application home,
            e.g. ``Images/<uuid>.png``; NULL when the set has no photo
        photo_source: Provenance of the photo (see PhotoSource)

    Relationships:
        bag: One-to-one with Bag
        manufacturer: Many-to-one with Manufacturer
        item_type: Many-to-one with ItemType
        elements: One-to-many with Element (cascade delete)
        tags: Many-to-many with Tag
    """

    __tablename__ = "sets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    bag_id: Mapped[int] = mapped_column(
        ForeignKey("bags.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    manufacturer_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("manufacturers.id", ondelete="SET NULL")
    )
    type_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("types.id", ondelete="SET NULL")
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    photo_path: Mapped[Optional[str]] = mapped_column(Text)
    photo_source: Mapped[Optional[str]] = mapped_column(Text)

    bag: Mapped[Bag] = relationship(back_populates="item_set")
    manufacturer: Mapped[Optional[Manufacturer]] = relationship(back_populates="sets")
    item_type: Mapped[Optional[ItemType]] = relationship(back_populates="sets")
    elements: Mapped[List["Element"]] = relationship(
        back_populates="item_set",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Element.id",
    )
    tags: Mapped[List[Tag]] = relationship(
        secondary=set_tags,
        back_populates="sets",
        passive_deletes=True,
        order_by="Tag.name",
    )

    @property
    def has_photo(self) -> bool:
        """Whether a photo path is recorded."""
        return bool(self.photo_path)

    def __repr__(self) -> str:
        return f"<ItemSet(id={self.id}, name='{self.name}')>"


class Element(Base):
    """
    A component of an item set.

    ``kind`` is 'stempel', 'stanze' or NULL (unspecified).
    """

    __tablename__ = "elements"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    set_id: Mapped[int] = mapped_column(
        ForeignKey("sets.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[Optional[str]] = mapped_column(Text)

    item_set: Mapped[ItemSet] = relationship(back_populates="elements")

    def __repr__(self) -> str:
        return f"<Element(id={self.id}, set_id={self.set_id}, name='{self.name}')>"
