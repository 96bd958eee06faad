"""
Migration Management Commands
------------------------------

Inspect the schema version ledger. Migrations themselves run
automatically whenever the store is opened (or via ``samla-db init``).

Commands:
    - status: Show current and latest version and pending migrations
    - history: Show applied migrations with timestamps

Usage:
    samla-db migration status
    samla-db migration history
"""
import click

from samla.core.logging_manager import handle_cli_error
from samla.core.exceptions import DatabaseError
from . import get_db


@click.group()
@click.pass_context
def migration(ctx: click.Context) -> None:
    """Schema migration inspection."""
    pass


@migration.command("status")
@click.pass_context
def migration_status(ctx):
    """Show the store's schema version."""
    try:
        db = get_db(ctx, run_migrations=False)
        engine = db.migration_engine
        current = engine.current_version()
        pending = engine.pending(current)

        click.echo(f"Current version: {current}")
        click.echo(f"Latest version:  {engine.latest_version}")
        if pending:
            click.echo("Pending migrations:")
            for m in pending:
                click.echo(f"  {m.version}: {m.description}")
        else:
            click.echo("✅ Store is up to date")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "migration_status")


@migration.command("history")
@click.pass_context
def migration_history(ctx):
    """Show applied migrations."""
    try:
        db = get_db(ctx, run_migrations=False)
        descriptions = {m.version: m.description for m in db.migration_engine.migrations}
        history = db.migration_engine.history()

        if not history:
            click.echo("No migrations applied")
            return

        for version, applied_at in history:
            description = descriptions.get(version, "unknown")
            click.echo(f"  {version}  {applied_at or '-'}  {description}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "migration_history")
