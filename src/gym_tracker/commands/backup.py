"""Backup export, import and clear commands."""

from pathlib import Path

import click

from .base import async_command, echo_success, load_services


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="File or directory to write to (default: current directory)",
)
@click.pass_context
@async_command
async def export(ctx, output: Path | None):
    """Export all customers, machines and workouts to a JSON backup.

    The default file name is gym-tracker-backup-YYYY-MM-DD.json.
    """
    services = await load_services(ctx)
    path = await services.backup.write_backup(output)
    echo_success(f"Exported to {path}")


@click.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def import_data(ctx, path: Path, yes: bool):
    """Restore a JSON backup, REPLACING all existing data.

    The file is checked completely before anything is deleted; an
    invalid file leaves existing data untouched.
    """
    if not yes:
        click.confirm(
            "Importing replaces ALL existing customers, machines and workouts. Continue?",
            abort=True,
        )

    services = await load_services(ctx)
    result = await services.backup.import_from_file(path)
    echo_success(result.message)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def clear(ctx, yes: bool):
    """Delete ALL customers, machines and workouts."""
    if not yes:
        click.confirm("Delete ALL data?", abort=True)

    services = await load_services(ctx)
    await services.backup.clear_all_data()
    echo_success("All data deleted")
