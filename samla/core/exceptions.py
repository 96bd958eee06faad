#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Samla catalog core.

This module defines the hierarchy of exceptions raised by the store,
the migration engine, the search compiler and the asset coordinator.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all store-related errors
    │   └── MigrationError - Schema migration failures (fatal)
    ├── ValidationError - Input rejected before any I/O
    └── AssetError - Base for photo asset lifecycle errors
        ├── AssetFetchError - Transient download failures (retryable)
        └── AssetPathError - Paths escaping the asset root

Usage:
    from samla.core.exceptions import DatabaseError, ValidationError

    try:
        photos.attach_url(set_id, url)
    except AssetFetchError as e:
        logger.log_warning(f"Download failed, retry later: {e}")
    except ValidationError as e:
        logger.log_error(e)
"""
from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """
    Base exception for store-related errors.

    Raised when store operations fail due to connection issues,
    query errors, integrity violations, or other database problems.
    The transaction is always rolled back before this is raised.

    Examples:
        >>> raise DatabaseError("Data integrity violation: UNIQUE constraint failed: boxes.code")
    """

    pass


class MigrationError(DatabaseError):
    """
    Exception for schema migration failures.

    Raised when a migration statement or the ledger read fails, or when
    the migration definitions themselves are inconsistent. Nothing of the
    failed run is persisted. Callers must halt start-up instead of running
    against the store.

    Examples:
        >>> raise MigrationError("Migration 2 failed: duplicate column name: type_id")
        >>> raise MigrationError("Store is at version 7, newer than this build (3)")
    """

    pass


class ValidationError(Exception):
    """
    Exception for input validation failures.

    Raised synchronously, before any store or filesystem access, when
    required input is missing, empty or malformed:
    - Blank names, codes or serial numbers
    - Non-positive identifiers
    - Unknown element kinds or photo sources
    - Empty asset targets

    Examples:
        >>> raise ValidationError("Set id must be a positive integer, got 0")
        >>> raise ValidationError("Required field 'name' missing or empty")
    """

    pass


class AssetError(Exception):
    """Base exception for photo asset lifecycle errors."""

    pass


class AssetFetchError(AssetError):
    """
    Exception for transient failures while downloading a remote asset.

    Raised on timeouts, connection errors and non-2xx responses. No file
    is written and no row is touched when this is raised, so the call can
    simply be retried.

    Attributes:
        url: The requested URL
        status_code: HTTP status code, when a response was received
        retryable: Always True
    """

    retryable = True

    def __init__(
        self, message: str, url: str = "", status_code: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AssetPathError(AssetError):
    """
    Exception for asset paths that resolve outside the asset root.

    Raised instead of deleting (or referencing) a file whose resolved
    location is not a descendant of the designated asset directory.

    Examples:
        >>> raise AssetPathError("Refusing to delete outside asset root: ../../etc/passwd")
    """

    pass
