"""Cargo type management commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.resolution import resolve_cargo_type_or_exit
from frotafin.domain.entities import MeasureUnit
from frotafin.domain.errors import DomainError

UNIT_LABELS = {MeasureUnit.WEIGHT: "ton", MeasureUnit.VOLUME: "m³"}


@click.group()
def cargo_group():
    """Manage cargo types."""
    pass


@cargo_group.command("list")
@click.pass_context
def list_cargo_types(ctx):
    """List all cargo types."""
    store = ctx.obj["store"]
    cargo_types = store.snapshot.cargo_types
    if not cargo_types:
        click.echo("No cargo types found.")
        return

    click.echo("\nCargo types:")
    for cargo_type in cargo_types:
        click.echo(f"  {cargo_type.name:<25} {UNIT_LABELS[cargo_type.unit]:<5} (ID: {cargo_type.id})")


@cargo_group.command("create")
@click.argument("name")
@click.option(
    "--unit",
    type=click.Choice(["weight", "volume"], case_sensitive=False),
    default="weight",
    help="Measured by weight (ton) or volume (m³)",
)
@click.pass_context
def create_cargo_type(ctx, name: str, unit: str):
    """Create a new cargo type."""
    store = ctx.obj["store"]
    try:
        cargo_type = store.add_cargo_type(name=name, unit=unit)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created cargo type '{cargo_type.name}' (ID: {cargo_type.id})")


@cargo_group.command("delete")
@click.argument("cargo_type")
@click.pass_context
def delete_cargo_type(ctx, cargo_type: str):
    """Delete a cargo type that no transaction uses."""
    store = ctx.obj["store"]
    found = resolve_cargo_type_or_exit(ctx, store, cargo_type)
    try:
        store.delete_cargo_type(found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted cargo type '{found.name}'")


def register_commands(cli):
    """Register cargo type commands with main CLI."""
    cli.add_command(cargo_group, name="cargo-type")
