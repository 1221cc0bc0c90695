"""Company settings commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.domain.entities import UserProfile
from frotafin.domain.errors import DomainError


@click.group()
def company_group():
    """Company settings."""
    pass


@company_group.command("show")
@click.pass_context
def show(ctx):
    """Show the company settings."""
    snapshot = ctx.obj["store"].snapshot
    click.echo(f"Company: {snapshot.company_name}")
    if snapshot.user:
        click.echo(f"User: {snapshot.user.name} <{snapshot.user.email}>")
    click.echo(f"Last sync: {snapshot.last_sync or 'never'}")


@company_group.command("rename")
@click.argument("name")
@click.pass_context
def rename(ctx, name: str):
    """Change the company name printed on reports."""
    store = ctx.obj["store"]
    try:
        store.set_company_name(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Company renamed to '{store.snapshot.company_name}'")


@company_group.command("user")
@click.option("--name", help="User name")
@click.option("--email", help="User e-mail")
@click.option("--clear", is_flag=True, help="Forget the stored user")
@click.pass_context
def user(ctx, name: str | None, email: str | None, clear: bool):
    """Store or clear the user profile."""
    store = ctx.obj["store"]
    if clear:
        store.set_user(None)
        click.echo("User profile cleared")
        return
    if not name or not email:
        click.echo("Error: --name and --email are required", err=True)
        ctx.exit(1)
    current = store.snapshot.user
    store.set_user(
        UserProfile(id=current.id if current else email.strip().lower(), name=name, email=email)
    )
    click.echo(f"User set to {name} <{email}>")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
