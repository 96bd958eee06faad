#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for the Samla commands.

Functions:
    setup_logger: Initialize a SamlaLogger for a CLI component
    resolve_config: Build the effective configuration from CLI options
    init_cli_context: Shared set-up for every command group

Usage:
    from samla.core.cli_utils import init_cli_context, resolve_config, setup_logger

    config = resolve_config(config_path, home=home)
    logger = setup_logger(config, "search")

    # inside a click group callback
    config = init_cli_context(ctx, "database", config_path, home, db_path, log_dir, verbose)
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from samla.core.config import SamlaConfig, load_config
from samla.core.exceptions import ValidationError
from samla.core.logging_manager import SamlaLogger, handle_cli_error


def resolve_config(
    config_path: Optional[str] = None,
    home: Optional[str] = None,
    db_path: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> SamlaConfig:
    """
    Load the config file and apply CLI overrides on top of it.

    Args:
        config_path: Explicit config file, or None for the default location
            (``<home>/config.yaml`` when a home override is given)
        home: Application home override
        db_path: Store file override
        log_dir: Log directory override

    Returns:
        The effective SamlaConfig
    """
    if config_path is None and home:
        config_path = str(Path(home) / "config.yaml")
    config = load_config(config_path)
    return config.with_overrides(
        home=Path(home) if home else None,
        db_path=Path(db_path) if db_path else None,
        log_dir=Path(log_dir) if log_dir else None,
    )


def setup_logger(config: SamlaConfig, component_name: str) -> SamlaLogger:
    """
    Setup logging for CLI operations.

    Args:
        config: Effective configuration (provides log_dir and rotation)
        component_name: Component identifier (e.g. 'database', 'search')

    Returns:
        Configured SamlaLogger writing below ``<log_dir>/operations``
    """
    operations_log_dir = config.log_dir / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return SamlaLogger(
        operations_log_dir,
        component_name=component_name,
        max_bytes=config.log_max_bytes,
        backup_count=config.log_backup_count,
    )


def init_cli_context(
    ctx: "click.Context",
    component_name: str,
    config_path: Optional[str] = None,
    home: Optional[str] = None,
    db_path: Optional[str] = None,
    log_dir: Optional[str] = None,
    verbose: bool = False,
) -> SamlaConfig:
    """
    Populate ``ctx.obj`` with config, logger and verbosity.

    Exits through handle_cli_error when the config file is invalid.

    Returns:
        The effective SamlaConfig
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        config = resolve_config(config_path, home=home, db_path=db_path, log_dir=log_dir)
    except ValidationError as e:
        handle_cli_error(ctx, e, "load_config")
    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logger(config, component_name)
    return config
