"""
Setup & Initialization Commands
--------------------------------

Commands:
    - init: Create the application folders and migrate the store
"""
import click

from samla.core.logging_manager import handle_cli_error
from samla.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Create folders and bring the store to the latest schema."""
    config = ctx.obj["config"]
    try:
        click.echo("🚀 Initializing Samla store...")
        config.ensure_dirs()
        click.echo(f"📁 Home: {config.home}")

        db = get_db(ctx, run_migrations=False)
        applied = db.migrate()

        if applied:
            click.echo(f"🗄️  Applied migrations: {', '.join(str(v) for v in applied)}")
        else:
            click.echo("🗄️  Store already up to date")
        click.echo(f"✅ Store ready at version {db.schema_version()}: {config.db_path}")

    except (DatabaseError, OSError) as e:
        handle_cli_error(ctx, e, "init", {"db_path": str(config.db_path)})
