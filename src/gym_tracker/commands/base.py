"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..db import RecordStore, default_data_dir, get_db_path
from ..errors import GymTrackerError
from ..services import Services, open_services


def async_command(f):
    """Decorator to run async Click commands.

    gym-tracker errors are reported on stderr and exit with status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except GymTrackerError as e:
            echo_error(str(e))
            click.get_current_context().exit(1)

    return wrapper


def get_data_dir(ctx: click.Context) -> Path:
    """Get the data directory path (``--data-dir`` or the configured default)."""
    obj = ctx.find_object(dict) or {}
    data_dir = obj.get("data_dir")
    return Path(data_dir) if data_dir else default_data_dir()


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    store = RecordStore(get_db_path(get_data_dir(ctx)))
    if not store.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'gym-tracker init' first.",
            err=True,
        )
        ctx.exit(1)


async def load_services(ctx: click.Context) -> Services:
    """Open the database for a command, upgrading old records if needed."""
    ensure_initialized(ctx)
    return await open_services(get_db_path(get_data_dir(ctx)))


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)).rstrip(),
        "".join("-" * w + " " * padding for w in widths).rstrip(),
    ]
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join(lines)
