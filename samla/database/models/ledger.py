"""
Migration Ledger
-----------------

ORM mapping of the ``schema_migrations`` table.

One row per applied migration; rows are only ever inserted, by the
migration engine.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party imports ---
from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base


class SchemaMigration(Base):
    """
    Applied schema version.

    Attributes:
        version: Migration version (primary key)
        applied_at: UTC timestamp text set by the store on insert
    """

    __tablename__ = "schema_migrations"

    version: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    applied_at: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<SchemaMigration(version={self.version}, applied_at='{self.applied_at}')>"
