"""Initialize project and status commands."""

import click

from ..db import COLLECTIONS, DB_VERSION, RecordStore, get_db_path
from .base import async_command, echo_info, echo_success, get_data_dir, load_services


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the gym-tracker database.

    Creates the data directory and the database. Running it again on an
    existing database is safe and upgrades workouts recorded by older
    versions.
    """
    data_dir = get_data_dir(ctx)
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing gym-tracker in {data_dir}")

    store = RecordStore(db_path)
    migrated = await store.init()
    echo_success("Database initialized")
    if migrated:
        echo_success(f"Upgraded {migrated} workout(s) to the series format")

    click.echo()
    click.echo("Next steps:")
    click.echo("  gym-tracker customers add \"Alex\"")
    click.echo("  gym-tracker machines add \"Treadmill\" --type Cardio")
    click.echo("  gym-tracker workouts add <customer-id> <machine-id> --series 3x10x0")


@click.command()
@click.pass_context
@async_command
async def status(ctx):
    """Show the database location and record counts."""
    services = await load_services(ctx)
    store = services.store

    click.echo(f"Database: {store.db_path}")
    click.echo(f"Schema version: {DB_VERSION}")
    for collection in COLLECTIONS:
        count = await store.count(collection)
        click.echo(f"  {collection}: {count}")
