"""Workout session commands."""

import re

import click

from ..models.workout import Series
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    format_table,
    load_services,
)

SERIES_PATTERN = re.compile(
    r"^\s*(\d+)\s*[xX]\s*(\d+)\s*(?:[xX@]\s*(\d+(?:\.\d+)?))?\s*$"
)


class SeriesType(click.ParamType):
    """A series written as SETSxREPS or SETSxREPSxWEIGHT (e.g. 3x10x40)."""

    name = "series"

    def convert(self, value, param, ctx):
        if isinstance(value, Series):
            return value
        match = SERIES_PATTERN.match(value)
        if not match:
            self.fail(f"'{value}' is not SETSxREPS or SETSxREPSxWEIGHT", param, ctx)
        sets, reps, weight = match.groups()
        return Series(sets=int(sets), reps=int(reps), weight=float(weight or 0))


SERIES = SeriesType()


def _collect_series(
    series: tuple[Series, ...],
    sets: int | None,
    reps: int | None,
    weight: float | None,
) -> list[Series] | None:
    """Combine --series values and the --sets/--reps/--weight shorthand."""
    collected = list(series)
    if sets is not None or reps is not None:
        if sets is None or reps is None:
            raise click.UsageError("--sets and --reps must be given together")
        collected.append(Series(sets=sets, reps=reps, weight=weight or 0.0))
    return collected or None


def _series_text(series: list[Series]) -> str:
    return ", ".join(str(s) for s in series)


@click.group()
def workouts():
    """Record and review workout sessions."""
    pass


@workouts.command(name="list")
@click.argument("customer_id")
@click.option("--machine", "-m", "machine_id", help="Only workouts on this machine")
@click.pass_context
@async_command
async def list_workouts(ctx, customer_id: str, machine_id: str | None):
    """List a customer's workouts, newest first."""
    services = await load_services(ctx)
    history = await services.workouts.get_by_customer(customer_id, machine_id)

    if not history:
        echo_info("No workouts found")
        return

    rows = [
        [w.id, w.date.isoformat(), w.machine_name, _series_text(w.series), w.notes or ""]
        for w in history
    ]
    click.echo(f"Workouts for {history[0].customer_name}")
    click.echo()
    click.echo(format_table(["ID", "Date", "Machine", "Series", "Notes"], rows))
    click.echo()
    click.echo(f"Total: {len(history)} workout(s)")


@workouts.command()
@click.argument("workout_id")
@click.pass_context
@async_command
async def show(ctx, workout_id: str):
    """Show one workout."""
    services = await load_services(ctx)
    workout = await services.workouts.get_by_id(workout_id)
    if workout is None:
        echo_error(f"Workout {workout_id} not found")
        ctx.exit(1)

    customer = await services.customers.get_by_id(workout.customer_id)
    machine = await services.machines.get_by_id(workout.machine_id)

    click.echo(f"Workout {workout.id}")
    click.echo(f"Date: {workout.date.isoformat()}")
    click.echo(f"Customer: {customer.name if customer else workout.customer_id}")
    click.echo(f"Machine: {machine.name if machine else workout.machine_id}")
    click.echo("Series:")
    for i, s in enumerate(workout.series, 1):
        click.echo(f"  {i}. {s}")
    click.echo(f"Total: {workout.total_sets} sets, volume {workout.total_volume:g}")
    if workout.notes:
        click.echo(f"Notes: {workout.notes}")


@workouts.command()
@click.argument("customer_id")
@click.argument("machine_id")
@click.option("--series", "-s", type=SERIES, multiple=True, help="SETSxREPS[xWEIGHT], repeatable")
@click.option("--sets", type=int, help="Sets of a single series")
@click.option("--reps", type=int, help="Reps of a single series")
@click.option("--weight", type=float, help="Weight of a single series")
@click.option("--date", "workout_date", help="Workout date (YYYY-MM-DD, default today)")
@click.option("--notes", help="Free-text notes")
@click.pass_context
@async_command
async def add(
    ctx,
    customer_id: str,
    machine_id: str,
    series: tuple[Series, ...],
    sets: int | None,
    reps: int | None,
    weight: float | None,
    workout_date: str | None,
    notes: str | None,
):
    """Record a workout.

    Examples:
        gym-tracker workouts add <customer> <machine> -s 3x10x40 -s 2x8x50

        gym-tracker workouts add <customer> <machine> --sets 3 --reps 12
    """
    collected = _collect_series(series, sets, reps, weight)
    if not collected:
        raise click.UsageError("Give at least one --series or --sets/--reps")

    services = await load_services(ctx)
    workout = await services.workouts.create(
        customer_id=customer_id,
        machine_id=machine_id,
        series=collected,
        date=workout_date,
        notes=notes,
    )
    echo_success(f"Workout recorded with ID: {workout.id}")


@workouts.command()
@click.argument("workout_id")
@click.option("--machine", "-m", "machine_id", help="Move to another machine")
@click.option("--series", "-s", type=SERIES, multiple=True, help="Replace all series")
@click.option("--sets", type=int)
@click.option("--reps", type=int)
@click.option("--weight", type=float)
@click.option("--date", "workout_date", help="New date (YYYY-MM-DD)")
@click.option("--notes", help="New notes")
@click.pass_context
@async_command
async def update(
    ctx,
    workout_id: str,
    machine_id: str | None,
    series: tuple[Series, ...],
    sets: int | None,
    reps: int | None,
    weight: float | None,
    workout_date: str | None,
    notes: str | None,
):
    """Change a recorded workout."""
    fields = {}
    collected = _collect_series(series, sets, reps, weight)
    if collected:
        fields["series"] = collected
    if machine_id is not None:
        fields["machine_id"] = machine_id
    if workout_date is not None:
        fields["date"] = workout_date
    if notes is not None:
        fields["notes"] = notes
    if not fields:
        echo_info("Nothing to update")
        return

    services = await load_services(ctx)
    await services.workouts.update(workout_id, **fields)
    echo_success(f"Workout {workout_id} updated")


@workouts.command()
@click.argument("workout_id")
@click.pass_context
@async_command
async def delete(ctx, workout_id: str):
    """Delete a workout."""
    services = await load_services(ctx)
    await services.workouts.delete(workout_id)
    echo_success(f"Workout {workout_id} deleted")
