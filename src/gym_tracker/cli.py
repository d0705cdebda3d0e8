"""CLI entry point for gym-tracker."""

import logging

import click

from . import __version__
from .commands import clear, customers, export, import_data, init, machines, status, workouts


@click.group()
@click.version_option(version=__version__, prog_name="gym-tracker")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar="GYM_TRACKER_DATA_DIR",
    help="Directory holding the database (default: ~/.local/share/gym-tracker)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, data_dir: str | None, verbose: bool):
    """gym-tracker: track customers, machines and workouts for gym trainers.

    All data is kept in a local SQLite database.

    Example usage:

        # Create the database
        gym-tracker init

        # Register a customer and a machine
        gym-tracker customers add "Alex" --email alex@example.com
        gym-tracker machines add "Treadmill" --type Cardio

        # Record and review workouts
        gym-tracker workouts add <customer-id> <machine-id> -s 3x10x0
        gym-tracker workouts list <customer-id>

        # Back up and restore
        gym-tracker export -o backups/
        gym-tracker import backups/gym-tracker-backup-2024-01-31.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


# Register commands
main.add_command(init)
main.add_command(status)
main.add_command(customers)
main.add_command(machines)
main.add_command(workouts)
main.add_command(export)
main.add_command(import_data)
main.add_command(clear)


if __name__ == "__main__":
    main()
