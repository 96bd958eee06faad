#!/usr/bin/env python3
"""
engine.py
--------------------
SQLAlchemy engine factory for the Samla SQLite store.

Every new connection gets foreign keys enforced and WAL journaling, and
``lower()`` is replaced with a Unicode-aware version so case-insensitive
matching in SQL agrees with Python's ``str.lower()``.

The pysqlite driver's own transaction handling is switched off and
``BEGIN`` is emitted by SQLAlchemy instead, so DDL statements run inside
the same transaction as the surrounding DML. The migration engine depends
on this to apply a batch of migrations all-or-nothing.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Union

# --- Third party imports ---
from sqlalchemy import Engine, create_engine, event


def _unicode_lower(value):
    if value is None:
        return None
    return str(value).lower()


def create_store_engine(db_path: Union[str, Path], echo: bool = False) -> Engine:
    """
    Create an engine for the store file at ``db_path``.

    Args:
        db_path: SQLite database file (parent directory must exist)
        echo: Echo emitted SQL

    Returns:
        Engine with the connection and transaction listeners installed
    """
    engine = create_engine(f"sqlite:///{db_path}", echo=echo, future=True)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        # SQLite's built-in lower() only folds ASCII
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine
