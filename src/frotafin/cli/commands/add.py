"""Add transaction command."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import TRANSACTION_TYPES, TYPE_LABELS, money
from frotafin.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_cargo_type_or_exit,
    resolve_category_or_exit,
    resolve_truck_or_exit,
)
from frotafin.domain.errors import DomainError


@click.command("add")
@click.option("--category", required=True, help="Category name or ID")
@click.option("--amount", required=True, help="Amount (e.g., 1500.00 or 'R$ 1.500,00')")
@click.option("--description", default="", help="Transaction description")
@click.option(
    "--date",
    "txn_date",
    help="Competence date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today'); default today",
)
@click.option("--execution-date", help="Date the service was executed (default: --date)")
@click.option("--due-date", help="Payment due date; unpaid entries show up in notifications")
@click.option("--unpaid", is_flag=True, help="Record as pending instead of paid")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(list(TRANSACTION_TYPES), case_sensitive=False),
    help="Override the category's type",
)
@click.option("--party", help="Client or supplier (subcategory)")
@click.option("--truck", help="Truck plate or ID")
@click.option("--start-km", help="Odometer at departure (freights)")
@click.option("--end-km", help="Odometer at arrival (freights)")
@click.option("--weight", help="Cargo weight in tons")
@click.option("--volume", help="Cargo volume in m³")
@click.option("--cargo-type", help="Cargo type name or ID")
@click.pass_context
def add_transaction(
    ctx,
    category: str,
    amount: str,
    description: str,
    txn_date: str | None,
    execution_date: str | None,
    due_date: str | None,
    unpaid: bool,
    txn_type: str | None,
    party: str | None,
    truck: str | None,
    start_km: str | None,
    end_km: str | None,
    weight: str | None,
    volume: str | None,
    cargo_type: str | None,
):
    """Add a revenue or expense transaction.

    Examples:
        frotafin add --category Fretes --amount 4500 --truck ABC-1234 --party "Pedreira Sul"
        frotafin add --category Seguro --amount "R$ 1.200,00" --due-date 10/04/2024 --unpaid
    """
    store = ctx.obj["store"]

    category_obj = resolve_category_or_exit(ctx, store, category)
    truck_obj = resolve_truck_or_exit(ctx, store, truck) if truck else None
    cargo_obj = resolve_cargo_type_or_exit(ctx, store, cargo_type) if cargo_type else None

    try:
        txn = store.add_transaction(
            category_id=category_obj.id,
            amount=parse_amount_or_exit(ctx, amount),
            description=description,
            date=parse_date_or_exit(ctx, store, txn_date),
            execution_date=parse_date_or_exit(ctx, store, execution_date, "execution date"),
            due_date=parse_date_or_exit(ctx, store, due_date, "due date"),
            is_paid=not unpaid,
            type=TRANSACTION_TYPES[txn_type.lower()] if txn_type else None,
            sub_category=party,
            truck_id=truck_obj.id if truck_obj else None,
            start_mileage=parse_amount_or_exit(ctx, start_km, "start km"),
            end_mileage=parse_amount_or_exit(ctx, end_km, "end km"),
            weight=parse_amount_or_exit(ctx, weight, "weight"),
            volume=parse_amount_or_exit(ctx, volume, "volume"),
            cargo_type_id=cargo_obj.id if cargo_obj else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {TYPE_LABELS[txn.type]}")
    click.echo(f"  Category: {category_obj.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {money(txn.amount)}")
    click.echo(f"  Status: {'Pago' if txn.is_paid else 'Pendente'}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if truck_obj:
        click.echo(f"  Truck: {truck_obj.plate}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
