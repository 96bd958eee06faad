#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators and the DatabaseOperation context manager for store
operations.
"""
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import SamlaLogger, safe_logger


def log_database_operation(operation_name: str):
    """
    Decorator to log manager methods with timing and context.

    The decorated method's instance must expose a ``logger`` attribute
    (None is allowed).

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"

            logger.log_debug(
                f"Starting {operation_name}",
                {
                    "operation_id": operation_id,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator converting SQLAlchemy errors into DatabaseError.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e.orig}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper


class DatabaseOperation:
    """
    Context manager combining handle_db_errors and log_database_operation
    for a block of code.

    Usage:
        with DatabaseOperation(self.logger, "create_box"):
            box = Box(...)
            self.session.add(box)
            self.session.flush()
    """

    def __init__(
        self,
        logger: Optional[SamlaLogger],
        operation_name: str,
        log_start: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.log_start = log_start
        self.details = details or {}
        self.start_time: Optional[datetime] = None

    def __enter__(self) -> "DatabaseOperation":
        self.start_time = datetime.now()
        if self.log_start:
            self.logger.log_debug(f"Starting {self.operation_name}", self.details)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.log_operation(
                f"{self.operation_name}_completed",
                {**self.details, "duration_seconds": duration, "success": True},
            )
            return False

        self.logger.log_error(
            exc_value,
            {**self.details, "operation": self.operation_name, "duration_seconds": duration},
        )

        if isinstance(exc_value, IntegrityError):
            raise DatabaseError(f"Data integrity violation: {exc_value.orig}") from exc_value
        if isinstance(exc_value, SQLAlchemyError):
            raise DatabaseError(f"Database operation failed: {exc_value}") from exc_value

        return False
