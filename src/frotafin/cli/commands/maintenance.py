"""Workshop (maintenance order) commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import STATUS_LABELS, money
from frotafin.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_truck_or_exit,
)
from frotafin.domain.entities import MaintenanceStatus
from frotafin.domain.errors import DomainError
from frotafin.domain.reports import maintenance_costs, truck_plate


@click.group()
def maintenance_group():
    """Manage maintenance orders."""
    pass


@maintenance_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value.lower() for s in MaintenanceStatus], case_sensitive=False),
    help="Only orders in this status",
)
@click.pass_context
def list_orders(ctx, status: str | None):
    """List maintenance orders with their booked costs."""
    store = ctx.obj["store"]
    snapshot = store.snapshot
    orders = [
        order
        for order in snapshot.maintenances
        if status is None or order.status == MaintenanceStatus(status.upper())
    ]
    if not orders:
        click.echo("No maintenance orders found.")
        return

    for order in orders:
        costs = maintenance_costs(snapshot, order.id)
        click.echo(
            f"\n{order.title} [{STATUS_LABELS[order.status]}] {order.type.value.title()} "
            f"- {truck_plate(snapshot, order.truck_id)}"
        )
        click.echo(f"  ID: {order.id}")
        click.echo(f"  Started: {order.date_started}")
        if order.date_finished:
            click.echo(f"  Finished: {order.date_finished}")
        if order.description:
            click.echo(f"  Description: {order.description}")
        if order.result_notes:
            click.echo(f"  Result: {order.result_notes}")
        click.echo(f"  Costs: {money(costs.total)} ({len(costs.items)} item(s))")


@maintenance_group.command("open")
@click.argument("truck")
@click.argument("title")
@click.option("--description", default="", help="What needs to be done")
@click.option(
    "--type",
    "order_type",
    type=click.Choice(["preventiva", "corretiva"], case_sensitive=False),
    default="preventiva",
    help="Preventive or corrective maintenance",
)
@click.option("--date", "started", help="Start date (default: today)")
@click.pass_context
def open_order(ctx, truck: str, title: str, description: str, order_type: str, started: str | None):
    """Open a maintenance order for TRUCK."""
    store = ctx.obj["store"]
    truck_obj = resolve_truck_or_exit(ctx, store, truck)
    try:
        order = store.add_maintenance(
            truck_id=truck_obj.id,
            title=title,
            description=description,
            type=order_type,
            date_started=parse_date_or_exit(ctx, store, started),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Opened maintenance order '{order.title}' for {truck_obj.plate} (ID: {order.id})")


@maintenance_group.command("start")
@click.argument("order_id")
@click.pass_context
def start_order(ctx, order_id: str):
    """Move an order to in progress."""
    store = ctx.obj["store"]
    try:
        store.start_maintenance(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Maintenance order {order_id} is in progress")


@maintenance_group.command("finish")
@click.argument("order_id")
@click.option("--notes", default="", help="Outcome of the service")
@click.option("--date", "finished", help="Finish date (default: today)")
@click.pass_context
def finish_order(ctx, order_id: str, notes: str, finished: str | None):
    """Complete an order."""
    store = ctx.obj["store"]
    try:
        store.finish_maintenance(
            order_id, result_notes=notes, finished_on=parse_date_or_exit(ctx, store, finished)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Maintenance order {order_id} completed")


@maintenance_group.command("add-item")
@click.argument("order_id")
@click.argument("description")
@click.argument("amount")
@click.option("--supplier", help="Workshop or parts supplier")
@click.option("--date", "item_date", help="Date of the expense (default: today)")
@click.pass_context
def add_item(ctx, order_id: str, description: str, amount: str, supplier: str | None, item_date: str | None):
    """Book a cost line (part or labor) for an order."""
    store = ctx.obj["store"]
    try:
        txn = store.add_maintenance_item(
            order_id,
            description=description,
            amount=parse_amount_or_exit(ctx, amount),
            supplier=supplier,
            date=parse_date_or_exit(ctx, store, item_date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Booked {money(txn.amount)} on order {order_id} (transaction {txn.id})")


@maintenance_group.command("costs")
@click.argument("order_id")
@click.pass_context
def show_costs(ctx, order_id: str):
    """Show the cost lines of an order."""
    store = ctx.obj["store"]
    snapshot = store.snapshot
    if snapshot.find_maintenance(order_id) is None:
        click.echo(f"Error: Maintenance order {order_id} not found", err=True)
        ctx.exit(1)

    costs = maintenance_costs(snapshot, order_id)
    if not costs.items:
        click.echo("No costs booked for this order.")
        return
    for txn in costs.items:
        supplier = f" ({txn.sub_category})" if txn.sub_category else ""
        click.echo(f"  {txn.date} {money(txn.amount):>14} {txn.description}{supplier}")
    click.echo(f"TOTAL {money(costs.total)}")


@maintenance_group.command("delete")
@click.argument("order_id")
@click.pass_context
def delete_order(ctx, order_id: str):
    """Delete an order without booked costs."""
    store = ctx.obj["store"]
    try:
        store.delete_maintenance(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted maintenance order {order_id}")


def register_commands(cli):
    """Register maintenance commands with main CLI."""
    cli.add_command(maintenance_group, name="maintenance")
