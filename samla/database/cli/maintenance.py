"""
Maintenance Commands
--------------------

Commands:
    - stats: Display catalog statistics
"""
import click

from samla.assets.storage import AssetStorage
from samla.core.logging_manager import handle_cli_error
from samla.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def stats(ctx):
    """Display catalog statistics."""
    try:
        db = get_db(ctx)
        config = ctx.obj["config"]
        stats_data = db.get_stats(AssetStorage(config.home, config.images_subdir))

        click.echo("\n📊 Catalog Statistics")
        click.echo("=" * 50)
        click.echo(f"  Locations: {stats_data.get('locations', 0)}")
        click.echo(f"  Boxes: {stats_data.get('boxes', 0)}")
        click.echo(f"  Sets: {stats_data.get('sets', 0)}")
        click.echo(f"  Products: {stats_data.get('products', 0)}")
        click.echo(f"  Tags: {stats_data.get('tags', 0)}")
        click.echo(f"  Images: {stats_data.get('images', 0)}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "stats")
