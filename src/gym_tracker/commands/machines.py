"""Machine management commands."""

import click

from ..models.machine import MachineType
from .base import async_command, echo_info, echo_success, format_table, load_services

MACHINE_TYPES = click.Choice([t.value for t in MachineType], case_sensitive=False)


@click.group()
def machines():
    """Manage gym machines."""
    pass


@machines.command(name="list")
@click.pass_context
@async_command
async def list_machines(ctx):
    """List machines."""
    services = await load_services(ctx)
    all_machines = await services.machines.get_all()

    if not all_machines:
        echo_info("No machines found. Add one with 'gym-tracker machines add'")
        return

    all_machines.sort(key=lambda m: m.name.casefold())
    rows = [[m.id, m.name, m.type] for m in all_machines]
    click.echo(format_table(["ID", "Name", "Type"], rows))
    click.echo()
    click.echo(f"Total: {len(all_machines)} machine(s)")


@machines.command()
@click.argument("name")
@click.option("--type", "-t", "machine_type", type=MACHINE_TYPES, required=True, help="Machine category")
@click.pass_context
@async_command
async def add(ctx, name: str, machine_type: str):
    """Add a machine."""
    services = await load_services(ctx)
    machine = await services.machines.create(name=name, type=machine_type)
    echo_success(f"Machine '{machine.name}' added with ID: {machine.id}")


@machines.command()
@click.argument("machine_id")
@click.option("--name", help="New name")
@click.option("--type", "-t", "machine_type", type=MACHINE_TYPES, help="New category")
@click.pass_context
@async_command
async def update(ctx, machine_id: str, name: str | None, machine_type: str | None):
    """Rename a machine or change its category."""
    fields = {}
    if name is not None:
        fields["name"] = name
    if machine_type is not None:
        fields["type"] = machine_type
    if not fields:
        echo_info("Nothing to update")
        return

    services = await load_services(ctx)
    machine = await services.machines.update(machine_id, **fields)
    echo_success(f"Machine '{machine.name}' updated")


@machines.command()
@click.argument("machine_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, machine_id: str, yes: bool):
    """Delete a machine and every workout recorded on it."""
    if not yes:
        click.confirm(
            f"Delete machine {machine_id} and all workouts on it?", abort=True
        )

    services = await load_services(ctx)
    await services.machines.delete(machine_id)
    echo_success(f"Machine {machine_id} deleted")
