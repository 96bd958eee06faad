#!/usr/bin/env python3
"""
cli.py
-------------------
Search the catalog from the command line.

Commands:
    samla-search castle
    samla-search @tag minifig --sort box
    samla-search "@ort keller"

Each result is printed as ``BOX/SERIAL  NAME`` followed by manufacturer,
location and tags when present.
"""
import click

from samla.core.cli_options import store_options
from samla.core.cli_utils import init_cli_context
from samla.core.exceptions import DatabaseError
from samla.core.logging_manager import handle_cli_error
from samla.database import SamlaDB
from samla.search.search_engine import SearchResult, SortKey


def format_result(result: SearchResult) -> str:
    """One display line for a search result."""
    line = f"{result.box_code}/{result.bag_serial}  {result.set_name}"
    extras = [
        value
        for value in (result.manufacturer_name, result.location_name)
        if value
    ]
    if result.tags:
        extras.append("#" + " #".join(result.tags))
    if extras:
        line += f"  ({', '.join(extras)})"
    return line


@click.command()
@click.argument("query", nargs=-1)
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([key.value for key in SortKey]),
    default=SortKey.NAME.value,
    show_default=True,
    help="Result ordering",
)
@store_options
@click.pass_context
def cli(ctx, query, sort_key, home, config_path, db_path, log_dir, verbose):
    """Search sets by name, tag, element, box, location or manufacturer."""
    config = init_cli_context(ctx, "search", config_path, home, db_path, log_dir, verbose)
    raw_query = " ".join(query)

    try:
        db = SamlaDB(config.db_path, logger=ctx.obj["logger"])
        try:
            results = db.search(raw_query, sort_key)
        finally:
            db.close()
    except DatabaseError as e:
        handle_cli_error(ctx, e, "search", {"query": raw_query})

    if not results:
        click.echo("No results")
        return

    for result in results:
        click.echo(format_result(result))
    click.echo(f"\n🔍 {len(results)} result(s)")


if __name__ == "__main__":
    cli()
