#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the Samla catalog store.

Each manager handles CRUD operations for one part of the catalog and
inherits from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    LocationManager: Storage locations
    BoxManager: Boxes at a location
    NamedLookupManager: Config-driven manager for name-only tables
    ManufacturerManager: Manufacturers (NamedLookupManager)
    TypeManager: Set types (NamedLookupManager)
    TagManager: Tags and set-tag links
    SetManager: Item sets, their bags and elements

Usage:
    from samla.database.managers import BoxManager, TagManager

    box_mgr = BoxManager(session, logger)
    tag_mgr = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .location_manager import LocationManager
from .box_manager import BoxManager
from .lookup_manager import ManufacturerManager, NamedLookupManager, TypeManager
from .tag_manager import TagManager
from .set_manager import SetDetails, SetManager

__all__ = [
    "BaseManager",
    "LocationManager",
    "BoxManager",
    "NamedLookupManager",
    "ManufacturerManager",
    "TypeManager",
    "TagManager",
    "SetDetails",
    "SetManager",
]
