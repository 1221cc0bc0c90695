"""Truck management commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.resolution import resolve_truck_or_exit
from frotafin.domain.errors import DomainError


@click.group()
def truck_group():
    """Manage the fleet."""
    pass


@truck_group.command("list")
@click.pass_context
def list_trucks(ctx):
    """List all trucks."""
    store = ctx.obj["store"]
    trucks = store.snapshot.trucks
    if not trucks:
        click.echo("No trucks found.")
        return

    click.echo(f"\n{'Plate':<12} {'Model':<25} ID")
    click.echo("-" * 70)
    for truck in trucks:
        click.echo(f"{truck.plate:<12} {truck.model:<25} {truck.id}")


@truck_group.command("create")
@click.argument("plate")
@click.option("--model", default="", help="Truck model (e.g., 'Volvo FH 540')")
@click.pass_context
def create_truck(ctx, plate: str, model: str):
    """Add a truck to the fleet."""
    store = ctx.obj["store"]
    try:
        truck = store.add_truck(plate=plate, model=model)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created truck {truck.plate} (ID: {truck.id})")


@truck_group.command("delete")
@click.argument("truck")
@click.pass_context
def delete_truck(ctx, truck: str):
    """Delete a truck without transactions or fuel records.

    TRUCK can be a plate or an ID.
    """
    store = ctx.obj["store"]
    found = resolve_truck_or_exit(ctx, store, truck)
    try:
        store.delete_truck(found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted truck {found.plate}")


def register_commands(cli):
    """Register truck commands with main CLI."""
    cli.add_command(truck_group, name="truck")
