"""
Association Tables
-------------------

Many-to-many relationship tables for the Samla catalog.

- set_tags: Item sets with their tags
"""
# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, Table

# --- Local imports ---
from .base import Base

set_tags = Table(
    "set_tags",
    Base.metadata,
    Column(
        "set_id",
        Integer,
        ForeignKey("sets.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
