"""
Samla store package.

SQLAlchemy models, the versioned migration engine, entity managers and
the SamlaDB entry point.

Usage:
    from samla.database import SamlaDB

    db = SamlaDB(config.db_path)
"""
from .manager import SamlaDB

__all__ = ["SamlaDB"]
