"""Customer management commands."""

import click

from .base import (
    async_command,
    echo_info,
    echo_success,
    format_table,
    load_services,
)


@click.group()
def customers():
    """Manage customers."""
    pass


@customers.command(name="list")
@click.option("--active", is_flag=True, help="Hide deactivated customers")
@click.pass_context
@async_command
async def list_customers(ctx, active: bool):
    """List customers (deactivated ones last)."""
    services = await load_services(ctx)
    service = services.customers

    all_customers = await (service.get_active() if active else service.get_all())
    if not all_customers:
        echo_info("No customers found. Add one with 'gym-tracker customers add'")
        return

    headers = ["ID", "Name", "Email", "Phone", "Status"]
    rows = [
        [
            c.id,
            c.name,
            c.email or "",
            c.phone or "",
            "deactivated" if c.deactivated else "active",
        ]
        for c in all_customers
    ]

    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_customers)} customer(s)")


@customers.command()
@click.argument("name")
@click.option("--email", help="Contact email")
@click.option("--phone", help="Contact phone number")
@click.pass_context
@async_command
async def add(ctx, name: str, email: str | None, phone: str | None):
    """Add a customer."""
    services = await load_services(ctx)
    customer = await services.customers.create(name=name, email=email, phone=phone)
    echo_success(f"Customer '{customer.name}' added with ID: {customer.id}")


@customers.command()
@click.argument("customer_id")
@click.option("--name", help="New name")
@click.option("--email", help="New email")
@click.option("--phone", help="New phone number")
@click.pass_context
@async_command
async def update(ctx, customer_id: str, name: str | None, email: str | None, phone: str | None):
    """Update a customer's details."""
    fields = {
        key: value
        for key, value in {"name": name, "email": email, "phone": phone}.items()
        if value is not None
    }
    if not fields:
        echo_info("Nothing to update")
        return

    services = await load_services(ctx)
    customer = await services.customers.update(customer_id, **fields)
    echo_success(f"Customer '{customer.name}' updated")


@customers.command()
@click.argument("customer_id")
@click.pass_context
@async_command
async def deactivate(ctx, customer_id: str):
    """Hide a customer from active lists, keeping their history."""
    services = await load_services(ctx)
    customer = await services.customers.deactivate(customer_id)
    echo_success(f"Customer '{customer.name}' deactivated")


@customers.command()
@click.argument("customer_id")
@click.pass_context
@async_command
async def reactivate(ctx, customer_id: str):
    """Make a deactivated customer active again."""
    services = await load_services(ctx)
    customer = await services.customers.reactivate(customer_id)
    echo_success(f"Customer '{customer.name}' reactivated")


@customers.command()
@click.argument("customer_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, customer_id: str, yes: bool):
    """Delete a customer and all of their workouts."""
    if not yes:
        click.confirm(
            f"Delete customer {customer_id} and all their workouts?", abort=True
        )

    services = await load_services(ctx)
    await services.customers.delete(customer_id)
    echo_success(f"Customer {customer_id} deleted")
