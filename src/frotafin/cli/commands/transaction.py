"""Transaction management commands."""

import click

from frotafin.cli.date_filters import in_range, period_options, resolve_cli_date_range
from frotafin.cli.formatting import TYPE_LABELS, money, optional
from frotafin.cli.resolution import (
    parse_date_or_exit,
    resolve_category_or_exit,
    resolve_truck_or_exit,
)
from frotafin.domain.entities import TransactionType
from frotafin.domain.reports import ZERO, category_name, truck_plate


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')")
@period_options
@click.option("--category", help="Category name or ID")
@click.option("--truck", help="Truck plate or ID")
@click.option("--unpaid", is_flag=True, help="Show only pending transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show every field of each transaction")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    truck: str | None,
    unpaid: bool,
    verbose: bool,
    **periods: bool,
):
    """View transactions with optional filters."""
    store = ctx.obj["store"]
    snapshot = store.snapshot
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={name.replace("_", "-"): value for name, value in periods.items()},
        today=store.today(),
    )
    category_id = resolve_category_or_exit(ctx, store, category).id if category else None
    truck_id = resolve_truck_or_exit(ctx, store, truck).id if truck else None

    transactions = [
        txn
        for txn in snapshot.transactions
        if in_range(txn.date, start, end)
        and (category_id is None or txn.category_id == category_id)
        and (truck_id is None or txn.truck_id == truck_id)
        and (not unpaid or not txn.is_paid)
    ]

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date} (executed {txn.execution_date})")
            click.echo(f"  Type: {TYPE_LABELS[txn.type]}")
            click.echo(f"  Amount: {money(txn.amount)}")
            click.echo(f"  Category: {category_name(snapshot, txn.category_id)}")
            click.echo(f"  Status: {'Pago' if txn.is_paid else 'Pendente'}")
            if txn.due_date:
                click.echo(f"  Due: {txn.due_date}")
            if txn.description:
                click.echo(f"  Description: {txn.description}")
            if txn.sub_category:
                click.echo(f"  Client/Supplier: {txn.sub_category}")
            if txn.truck_id:
                click.echo(f"  Truck: {truck_plate(snapshot, txn.truck_id)}")
            if txn.start_mileage is not None or txn.end_mileage is not None:
                click.echo(f"  KM: {optional(txn.start_mileage)} -> {optional(txn.end_mileage)}")
            if txn.cargo_type_label:
                click.echo(f"  Cargo: {txn.cargo_type_label}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 110)
        click.echo(
            f"{'Date':<12} {'Type':<17} {'Amount':<16} {'Category':<15} "
            f"{'Truck':<10} {'Paid':<5} {'Description':<30}"
        )
        click.echo("-" * 110)
        for txn in transactions:
            click.echo(
                f"{str(txn.date):<12} {TYPE_LABELS[txn.type]:<17} {money(txn.amount):<16} "
                f"{category_name(snapshot, txn.category_id)[:15]:<15} "
                f"{(truck_plate(snapshot, txn.truck_id) if txn.truck_id else ''):<10} "
                f"{('yes' if txn.is_paid else 'no'):<5} {txn.description[:30]:<30}"
            )
            click.echo(f"  id: {txn.id}")

    revenue = sum((t.amount for t in transactions if t.type == TransactionType.REVENUE), ZERO)
    expenses = sum((t.amount for t in transactions if t.type != TransactionType.REVENUE), ZERO)
    click.echo("-" * 110)
    click.echo(
        f"TOTAL  Revenue: {money(revenue)} | Expenses: {money(expenses)} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str) -> None:
    """Delete a transaction."""
    store = ctx.obj["store"]
    if store.snapshot.find_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    store.delete_transaction(transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("pay")
@click.argument("transaction_id")
@click.pass_context
def pay_transaction(ctx, transaction_id: str) -> None:
    """Mark a pending transaction as paid."""
    store = ctx.obj["store"]
    if store.snapshot.find_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)
    store.mark_as_paid(transaction_id)
    click.echo(f"Marked transaction {transaction_id} as paid")


@transaction_group.command("postpone")
@click.argument("transaction_id")
@click.option("--from", "from_date", help="Reference date (default: today); due date becomes the next day")
@click.pass_context
def postpone_transaction(ctx, transaction_id: str, from_date: str | None) -> None:
    """Push a transaction's due date to tomorrow."""
    store = ctx.obj["store"]
    if store.snapshot.find_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)
    snapshot = store.postpone_due_date(
        transaction_id, now=parse_date_or_exit(ctx, store, from_date, "reference date")
    )
    txn = snapshot.find_transaction(transaction_id)
    click.echo(f"Transaction {transaction_id} now due on {txn.due_date}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
