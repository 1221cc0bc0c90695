"""Category management commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import TRANSACTION_TYPES, TYPE_LABELS
from frotafin.cli.resolution import resolve_category_or_exit
from frotafin.domain.errors import DomainError


@click.group()
def category_group():
    """Manage transaction categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories with their type."""
    store = ctx.obj["store"]
    categories = store.snapshot.categories
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for category in categories:
        click.echo(f"  {category.name:<25} {TYPE_LABELS[category.type]:<18} (ID: {category.id})")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(list(TRANSACTION_TYPES), case_sensitive=False),
    default="variable",
    help="Category type (default: variable)",
)
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category."""
    store = ctx.obj["store"]
    try:
        category = store.add_category(name=name, type=TRANSACTION_TYPES[category_type.lower()])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category that no transaction uses.

    CATEGORY can be a name or an ID.
    """
    store = ctx.obj["store"]
    found = resolve_category_or_exit(ctx, store, category)
    try:
        store.delete_category(found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{found.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
