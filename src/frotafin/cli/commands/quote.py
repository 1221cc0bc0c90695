"""Freight quote calculator command."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import money, percent
from frotafin.cli.resolution import parse_amount_or_exit, resolve_truck_or_exit
from frotafin.domain.entities import PricingMode
from frotafin.domain.errors import DomainError
from frotafin.domain.quote import ZERO, FreightQuote, calculate_quote, confirm_quote

MODES = {"ton": PricingMode.PER_TON, "m3": PricingMode.PER_M3}


@click.command("quote")
@click.option(
    "--mode",
    type=click.Choice(list(MODES), case_sensitive=False),
    default="ton",
    help="Price per ton, or per m³ per km",
)
@click.option("--distance", required=True, help="Trip distance in km")
@click.option("--load", "load_amount", required=True, help="Tons or m³ carried")
@click.option("--unit-price", required=True, help="Price per ton, or per m³ per km")
@click.option("--fuel-price", required=True, help="Diesel price per liter")
@click.option("--other-expenses", default="0", help="Tolls, meals, ...")
@click.option("--save", is_flag=True, help="Record the freight as paid revenue")
@click.option("--truck", help="Truck plate or ID (required with --save)")
@click.option("--client", help="Client name (used with --save)")
@click.pass_context
def quote(
    ctx,
    mode: str,
    distance: str,
    load_amount: str,
    unit_price: str,
    fuel_price: str,
    other_expenses: str,
    save: bool,
    truck: str | None,
    client: str | None,
):
    """Price a freight and estimate its profit.

    Fuel is estimated at 2 km per liter.

    Examples:
        frotafin quote --distance 120 --load 30 --unit-price 45 --fuel-price 5.89
        frotafin quote --mode m3 --distance 80 --load 20 --unit-price 1.5 --fuel-price 5.89 --save --truck ABC-1234
    """
    store = ctx.obj["store"]
    freight = FreightQuote(
        mode=MODES[mode.lower()],
        fuel_price=parse_amount_or_exit(ctx, fuel_price, "fuel price"),
        distance=parse_amount_or_exit(ctx, distance, "distance"),
        load_amount=parse_amount_or_exit(ctx, load_amount, "load"),
        unit_price=parse_amount_or_exit(ctx, unit_price, "unit price"),
        other_expenses=parse_amount_or_exit(ctx, other_expenses, "other expenses") or ZERO,
    )
    result = calculate_quote(freight)

    click.echo("\nFreight quote")
    click.echo("-" * 40)
    click.echo(f"  Suggested freight: {money(result.suggested_freight)}")
    click.echo(f"  Fuel needed:       {result.liters_needed:.2f} L ({money(result.fuel_cost)})")
    click.echo(f"  Total cost:        {money(result.total_cost)}")
    click.echo(f"  Profit:            {money(result.profit)}")
    click.echo(f"  Margin:            {percent(result.margin)}")
    click.echo(f"  Cost per km:       {money(result.cost_per_km)}")
    click.echo(f"  Revenue per km:    {money(result.revenue_per_km)}")

    if not save:
        return
    if not truck:
        click.echo("Error: --truck is required with --save", err=True)
        ctx.exit(1)
    truck_obj = resolve_truck_or_exit(ctx, store, truck)
    try:
        txn = confirm_quote(store, freight, truck_obj.id, client_name=client)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"\nSaved freight '{txn.description}' for {truck_obj.plate} (ID: {txn.id})")


def register_commands(cli):
    """Register quote command with main CLI."""
    cli.add_command(quote)
