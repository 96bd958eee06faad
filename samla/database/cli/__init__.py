#!/usr/bin/env python3
"""
Samla Store Management CLI
--------------------------

Command-line interface for store setup and inspection.

This module provides the main CLI group and shared context setup
for all store commands.

Command Structure:
    - Setup & Initialization (init)
    - Migration Management (migration status, migration history)
    - Stats (stats)

Usage:
    # Create folders and migrate the store
    samla-db init

    # Use another application home
    samla-db --home /tmp/samla init

    # Get help for a specific command group
    samla-db migration --help
"""
import click

from samla.core.cli_options import store_options
from samla.core.cli_utils import init_cli_context
from samla.database import SamlaDB


@click.group()
@store_options
@click.pass_context
def cli(ctx, home, config_path, db_path, log_dir, verbose):
    """Samla Store Management CLI"""
    init_cli_context(ctx, "database", config_path, home, db_path, log_dir, verbose)


def get_db(ctx, run_migrations: bool = True) -> SamlaDB:
    """Get or create the store instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = SamlaDB(
            db_path=ctx.obj["config"].db_path,
            run_migrations=run_migrations,
            logger=ctx.obj["logger"],
        )
        ctx.call_on_close(ctx.obj["db"].close)
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init  # noqa: E402
from .migration import migration  # noqa: E402
from .maintenance import stats  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(stats)

# Register command groups
cli.add_command(migration)


if __name__ == "__main__":
    cli(obj={})
