#!/usr/bin/env python3
"""
cli.py
-------------------
Manage set photos from the command line.

Commands:
    samla-photo attach-file 12 ~/Pictures/castle.jpg
    samla-photo attach-url 12 https://example.com/castle.png
    samla-photo clear 12
    samla-photo path 12
"""
import click

from samla.assets.photo_manager import PhotoManager
from samla.assets.storage import AssetStorage
from samla.core.cli_options import store_options
from samla.core.cli_utils import init_cli_context
from samla.core.exceptions import AssetError, DatabaseError, ValidationError
from samla.core.logging_manager import handle_cli_error
from samla.database import SamlaDB

PHOTO_ERRORS = (AssetError, DatabaseError, ValidationError, OSError)


@click.group()
@store_options
@click.pass_context
def cli(ctx, home, config_path, db_path, log_dir, verbose):
    """Samla photo management"""
    init_cli_context(ctx, "assets", config_path, home, db_path, log_dir, verbose)


def get_photo_manager(ctx) -> PhotoManager:
    """Build the photo coordinator for the configured store."""
    if "photos" not in ctx.obj:
        config = ctx.obj["config"]
        logger = ctx.obj["logger"]
        db = SamlaDB(config.db_path, logger=logger)
        ctx.call_on_close(db.close)
        storage = AssetStorage(config.home, config.images_subdir, logger=logger)
        ctx.obj["photos"] = PhotoManager(
            db, storage, logger=logger, timeout=config.download_timeout
        )
    return ctx.obj["photos"]


@cli.command("attach-file")
@click.argument("set_id", type=int)
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.pass_context
def attach_file(ctx, set_id, file_path):
    """Copy FILE_PATH into the asset root and attach it to SET_ID."""
    try:
        stored = get_photo_manager(ctx).attach_file(set_id, file_path)
        click.echo(f"🖼️  Attached {stored} to set {set_id}")
    except PHOTO_ERRORS as e:
        handle_cli_error(ctx, e, "attach_file", {"set_id": set_id, "file": file_path})


@cli.command("attach-url")
@click.argument("set_id", type=int)
@click.argument("url")
@click.pass_context
def attach_url(ctx, set_id, url):
    """Download URL and attach it to SET_ID."""
    try:
        stored = get_photo_manager(ctx).attach_url(set_id, url)
        click.echo(f"🌐 Downloaded {stored} for set {set_id}")
    except PHOTO_ERRORS as e:
        handle_cli_error(ctx, e, "attach_url", {"set_id": set_id, "url": url})


@cli.command()
@click.argument("set_id", type=int)
@click.pass_context
def clear(ctx, set_id):
    """Remove the photo of SET_ID."""
    try:
        old_path = get_photo_manager(ctx).clear_asset(set_id)
        if old_path:
            click.echo(f"🗑️  Removed {old_path} from set {set_id}")
        else:
            click.echo(f"Set {set_id} has no photo")
    except PHOTO_ERRORS as e:
        handle_cli_error(ctx, e, "clear_asset", {"set_id": set_id})


@cli.command()
@click.argument("set_id", type=int)
@click.pass_context
def path(ctx, set_id):
    """Print the absolute photo location of SET_ID."""
    try:
        location = get_photo_manager(ctx).photo_path(set_id)
    except PHOTO_ERRORS as e:
        handle_cli_error(ctx, e, "photo_path", {"set_id": set_id})

    if location is None:
        click.echo(f"Set {set_id} has no photo")
    else:
        click.echo(str(location))


if __name__ == "__main__":
    cli()
