"""Fuel control commands."""

import click

from frotafin.cli.date_filters import in_range, period_options, resolve_cli_date_range
from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import money
from frotafin.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_truck_or_exit,
)
from frotafin.domain.errors import DomainError
from frotafin.domain.reports import ZERO, fleet_fuel_efficiency, fuel_efficiency, truck_plate


@click.group()
def fuel_group():
    """Record fuel fills and follow consumption."""
    pass


@fuel_group.command("add")
@click.option("--truck", required=True, help="Truck plate or ID")
@click.option("--km", required=True, help="Odometer reading at the fill")
@click.option("--liters", required=True, help="Liters filled")
@click.option("--price", required=True, help="Price per liter")
@click.option("--cost", help="Total cost (default: liters x price)")
@click.option("--date", "fill_date", help="Fill date (default: today)")
@click.pass_context
def add_fuel(ctx, truck: str, km: str, liters: str, price: str, cost: str | None, fill_date: str | None):
    """Record a fuel fill.

    A paid expense is booked in the fuel category at the same time.

    Examples:
        frotafin fuel add --truck ABC-1234 --km 150000 --liters 50 --price 5.89
    """
    store = ctx.obj["store"]
    truck_obj = resolve_truck_or_exit(ctx, store, truck)
    try:
        record = store.add_fuel_record(
            truck_id=truck_obj.id,
            mileage=parse_amount_or_exit(ctx, km, "km"),
            liters=parse_amount_or_exit(ctx, liters, "liters"),
            price_per_liter=parse_amount_or_exit(ctx, price, "price"),
            cost=parse_amount_or_exit(ctx, cost, "cost"),
            date=parse_date_or_exit(ctx, store, fill_date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded fuel fill {record.id}")
    click.echo(f"  Truck: {truck_obj.plate}")
    click.echo(f"  Liters: {record.liters:.2f}")
    click.echo(f"  Cost: {money(record.cost)}")


@fuel_group.command("list")
@click.option("--truck", help="Truck plate or ID")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.pass_context
def list_fuel(ctx, truck: str | None, start_date: str | None, end_date: str | None, **periods: bool):
    """List fuel fills."""
    store = ctx.obj["store"]
    snapshot = store.snapshot
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={name.replace("_", "-"): value for name, value in periods.items()},
        today=store.today(),
    )
    truck_id = resolve_truck_or_exit(ctx, store, truck).id if truck else None

    records = [
        rec
        for rec in snapshot.fuel_records
        if (truck_id is None or rec.truck_id == truck_id) and in_range(rec.date, start, end)
    ]
    if not records:
        click.echo("No fuel records found.")
        return

    click.echo(f"\n{'Date':<12} {'Truck':<10} {'KM':>10} {'Liters':>9} {'Price/L':>9} {'Cost':>14}")
    click.echo("-" * 70)
    for rec in records:
        click.echo(
            f"{str(rec.date):<12} {truck_plate(snapshot, rec.truck_id):<10} {rec.mileage:>10} "
            f"{rec.liters:>9.2f} {rec.price_per_liter:>9.3f} {money(rec.cost):>14}"
        )
        click.echo(f"  id: {rec.id}")
    click.echo("-" * 70)
    total_cost = sum((rec.cost for rec in records), ZERO)
    total_liters = sum((rec.liters for rec in records), ZERO)
    click.echo(f"TOTAL  {total_liters:.2f} L | {money(total_cost)} | Count: {len(records)}")


@fuel_group.command("delete")
@click.argument("record_id")
@click.pass_context
def delete_fuel(ctx, record_id: str):
    """Delete a fuel fill and its paired expense."""
    store = ctx.obj["store"]
    if not any(rec.id == record_id for rec in store.snapshot.fuel_records):
        click.echo(f"Error: Fuel record {record_id} not found", err=True)
        ctx.exit(1)
    store.delete_fuel_record(record_id)
    click.echo(f"Deleted fuel record {record_id}")


@fuel_group.command("efficiency")
@click.option("--truck", help="Truck plate or ID (default: whole fleet)")
@click.pass_context
def efficiency(ctx, truck: str | None):
    """Show average km per liter.

    The first fill of each truck only tops up the tank, so its liters are
    left out of the average.
    """
    store = ctx.obj["store"]
    snapshot = store.snapshot
    if truck:
        truck_obj = resolve_truck_or_exit(ctx, store, truck)
        results = [fuel_efficiency(snapshot.fuel_records, truck_obj.id)]
    else:
        results = fleet_fuel_efficiency(snapshot)

    if not results:
        click.echo("No trucks found.")
        return

    click.echo(f"\n{'Truck':<10} {'KM':>10} {'Liters':>10} {'KM/L':>8}")
    click.echo("-" * 42)
    for result in results:
        average = f"{result.average:.2f}" if result.average is not None else "-"
        click.echo(
            f"{truck_plate(snapshot, result.truck_id):<10} {result.km_traveled:>10} "
            f"{result.total_liters:>10.2f} {average:>8}"
        )


def register_commands(cli):
    """Register fuel commands with main CLI."""
    cli.add_command(fuel_group, name="fuel")
