"""Supplier quote (budget request) commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import money
from frotafin.cli.resolution import parse_amount_or_exit, parse_date_or_exit
from frotafin.domain.errors import DomainError
from frotafin.domain.reports import lowest_price_option


@click.group()
def budget_group():
    """Compare supplier quotes for a purchase."""
    pass


@budget_group.command("list")
@click.pass_context
def list_requests(ctx):
    """List budget requests and their options.

    The cheapest option is marked with '$', the selected one with '*'.
    """
    store = ctx.obj["store"]
    requests = store.snapshot.budgets
    if not requests:
        click.echo("No budget requests found.")
        return

    for request in requests:
        product = f" - {request.product_name}" if request.product_name else ""
        click.echo(f"\n{request.title}{product} ({request.date})")
        click.echo(f"  ID: {request.id}")
        if not request.options:
            click.echo("  No options yet.")
            continue
        cheapest = lowest_price_option(request)
        for option in request.options:
            marks = ("*" if option.is_selected else " ") + ("$" if option.id == cheapest else " ")
            click.echo(f"  {marks} {option.supplier:<25} {money(option.amount):>14}  {option.id}")
            if option.details:
                click.echo(f"       {option.details}")


@budget_group.command("create")
@click.argument("title")
@click.option("--product", default="", help="Product or service being quoted")
@click.option("--description", default="", help="Details of the request")
@click.option("--date", "request_date", help="Request date (default: today)")
@click.pass_context
def create_request(ctx, title: str, product: str, description: str, request_date: str | None):
    """Open a budget request."""
    store = ctx.obj["store"]
    try:
        request = store.add_budget_request(
            title=title,
            product_name=product,
            description=description,
            date=parse_date_or_exit(ctx, store, request_date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created budget request '{request.title}' (ID: {request.id})")


@budget_group.command("delete")
@click.argument("request_id")
@click.pass_context
def delete_request(ctx, request_id: str):
    """Delete a budget request and its options."""
    store = ctx.obj["store"]
    if store.snapshot.find_budget(request_id) is None:
        click.echo(f"Error: Budget request {request_id} not found", err=True)
        ctx.exit(1)
    store.delete_budget_request(request_id)
    click.echo(f"Deleted budget request {request_id}")


@budget_group.command("add-option")
@click.argument("request_id")
@click.argument("supplier")
@click.argument("amount")
@click.option("--details", default="", help="Payment terms, delivery time, ...")
@click.pass_context
def add_option(ctx, request_id: str, supplier: str, amount: str, details: str):
    """Add a supplier's quote to a request."""
    store = ctx.obj["store"]
    try:
        option = store.add_option_to_request(
            request_id,
            supplier=supplier,
            amount=parse_amount_or_exit(ctx, amount),
            details=details,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added option from {option.supplier}: {money(option.amount)} (ID: {option.id})")


@budget_group.command("remove-option")
@click.argument("request_id")
@click.argument("option_id")
@click.pass_context
def remove_option(ctx, request_id: str, option_id: str):
    """Remove an option from a request."""
    store = ctx.obj["store"]
    try:
        store.delete_option_from_request(request_id, option_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed option {option_id}")


@budget_group.command("select")
@click.argument("request_id")
@click.argument("option_id")
@click.pass_context
def select_option(ctx, request_id: str, option_id: str):
    """Choose the winning option of a request."""
    store = ctx.obj["store"]
    try:
        store.select_option(request_id, option_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Selected option {option_id}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
