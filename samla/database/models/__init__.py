"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Samla catalog store.

- base: Declarative base
- enums: Enumeration types
- associations: Many-to-many tables
- catalog: Location, Box, Bag, ItemSet, Element, Manufacturer, ItemType, Tag
- ledger: SchemaMigration

Usage:
    from samla.database.models import ItemSet, Box, Tag
"""
# Base class
from .base import Base

# Enumerations
from .enums import PhotoSource

# Association tables
from .associations import set_tags

# Catalog models
from .catalog import Bag, Box, Element, ItemSet, ItemType, Location, Manufacturer, Tag

# Migration ledger
from .ledger import SchemaMigration

__all__ = [
    "Base",
    "PhotoSource",
    "set_tags",
    "Bag",
    "Box",
    "Element",
    "ItemSet",
    "ItemType",
    "Location",
    "Manufacturer",
    "Tag",
    "SchemaMigration",
]
