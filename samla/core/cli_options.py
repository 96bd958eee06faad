#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click option decorators shared by samla-db, samla-search and
samla-photo.

Usage:
    from samla.core.cli_options import store_options

    @click.group()
    @store_options
    @click.pass_context
    def cli(ctx, home, config_path, db_path, log_dir, verbose):
        init_cli_context(ctx, "database", config_path, home, db_path, log_dir, verbose)
"""
import click


# ═══════════════════════════════════════════════════════════════════════════
# LOCATION OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

home_option = click.option(
    "--home",
    type=click.Path(file_okay=False),
    default=None,
    help="Application home directory (default: $SAMLA_HOME or the user config folder)",
)

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config.yaml (default: <home>/config.yaml)",
)

db_path_option = click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to database file",
)

log_dir_option = click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for log files",
)


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

verbose_option = click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)


def store_options(function):
    """Apply every store location option plus --verbose."""
    for option in (verbose_option, log_dir_option, db_path_option, config_option, home_option):
        function = option(function)
    return function
