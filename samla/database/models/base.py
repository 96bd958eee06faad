"""
Base Classes
------------

Foundational ORM class for the Samla catalog models.

The tables themselves are created by the migration engine
(``samla.database.migrations``); the models below only map them.
"""
# --- Third party ---
from sqlalchemy.orm import DeclarativeBase


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    ``Base.metadata`` is never used to create tables: the versioned
    migrations own the schema.
    """

    pass
