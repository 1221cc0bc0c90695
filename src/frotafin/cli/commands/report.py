"""Report commands: income statement, trends, fleet ranking and CSV export."""

from pathlib import Path

import click

from frotafin.cli.formatting import money, percent
from frotafin.domain.csv_export import (
    export_fuel_log,
    export_income_statement,
    export_truck_ranking,
    period_label,
)
from frotafin.domain.defaults import MONTHS
from frotafin.domain.reports import (
    available_years,
    fleet_totals,
    income_statement,
    monthly_trend,
    truck_ranking,
)

month_option = click.option(
    "--month", type=click.IntRange(1, 12), help="Month number (default: whole year)"
)
year_option = click.option("--year", type=int, help="Year (default: current year)")


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("years")
@click.pass_context
def years(ctx):
    """List the years that have data."""
    store = ctx.obj["store"]
    for year in available_years(store.snapshot, store.today()):
        click.echo(year)


@report_group.command("dre")
@year_option
@month_option
@click.pass_context
def dre(ctx, year: int | None, month: int | None):
    """Realized income statement (DRE).

    Only paid transactions count towards the result; unpaid ones are shown
    apart as amounts to receive and to pay.
    """
    store = ctx.obj["store"]
    year = year or store.today().year
    statement = income_statement(store.snapshot, year, month)

    click.echo(f"\n{store.snapshot.company_name} - DRE {period_label(year, month).replace('_', ' ')}")
    click.echo("=" * 50)
    click.echo(f"{'Receita bruta realizada':<32} {money(statement.revenue):>16}")
    click.echo(f"{'(-) Custos fixos':<32} {money(statement.fixed_costs):>16}")
    click.echo(f"{'(=) Lucro bruto':<32} {money(statement.gross_profit):>16}")
    click.echo(f"{'(-) Despesas variáveis':<32} {money(statement.variable_expenses):>16}")
    click.echo(f"{'(=) Lucro líquido':<32} {money(statement.net_profit):>16}")
    click.echo(f"{'Margem':<32} {percent(statement.profit_margin):>16}")
    click.echo("-" * 50)
    click.echo(f"{'A receber (pendente)':<32} {money(statement.pending_revenue):>16}")
    click.echo(f"{'A pagar (pendente)':<32} {money(statement.pending_expenses):>16}")

    if statement.category_totals:
        click.echo("\nPor categoria:")
        for name, total in statement.category_totals:
            click.echo(f"  {name:<30} {money(total):>16}")


@report_group.command("trend")
@year_option
@click.pass_context
def trend(ctx, year: int | None):
    """Realized revenue, expenses and profit per month."""
    store = ctx.obj["store"]
    year = year or store.today().year

    click.echo(f"\n{'Month':<12} {'Revenue':>16} {'Expenses':>16} {'Profit':>16}")
    click.echo("-" * 63)
    for point in monthly_trend(store.snapshot, year):
        click.echo(
            f"{MONTHS[point.month - 1]:<12} {money(point.revenue):>16} "
            f"{money(point.expenses):>16} {money(point.profit):>16}"
        )


@report_group.command("trucks")
@year_option
@click.option("--details", is_flag=True, help="Show expenses by category for each truck")
@click.pass_context
def trucks(ctx, year: int | None, details: bool):
    """Profitability ranking of the fleet."""
    store = ctx.obj["store"]
    year = year or store.today().year
    ranking = truck_ranking(store.snapshot, year)
    if not ranking:
        click.echo("No trucks found.")
        return

    click.echo(
        f"\n{'#':<3} {'Plate':<10} {'Revenue':>15} {'Costs':>15} {'Result':>15} "
        f"{'KM':>9} {'Cost/KM':>12}"
    )
    click.echo("-" * 85)
    for position, perf in enumerate(ranking, start=1):
        click.echo(
            f"{position:<3} {perf.plate:<10} {money(perf.revenue):>15} "
            f"{money(perf.total_cost):>15} {money(perf.net_result):>15} "
            f"{perf.total_km:>9} {money(perf.cost_per_km):>12}"
        )
        if details:
            for name, amount in sorted(perf.expense_by_category.items()):
                click.echo(f"      {name:<25} {money(amount):>15}")

    totals = fleet_totals(ranking)
    click.echo("-" * 85)
    click.echo(
        f"Fleet  Revenue: {money(totals.revenue)} | Costs: {money(totals.costs)} | "
        f"Result: {money(totals.result)}"
    )


@report_group.command("export")
@click.argument("kind", type=click.Choice(["dre", "fuel", "ranking"], case_sensitive=False))
@year_option
@month_option
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Directory for the CSV file (default: current directory)",
)
@click.pass_context
def export(ctx, kind: str, year: int | None, month: int | None, output_dir: str):
    """Export a report as a spreadsheet-friendly CSV file."""
    store = ctx.obj["store"]
    snapshot = store.snapshot
    year = year or store.today().year
    kind = kind.lower()

    if kind == "dre":
        report = export_income_statement(snapshot, year, month, exported_on=store.today())
    elif kind == "fuel":
        report = export_fuel_log(snapshot, exported_on=store.today())
    else:
        report = export_truck_ranking(snapshot, year)

    try:
        path = report.write(Path(output_dir))
    except OSError as e:
        click.echo(f"Error: Could not write report: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {path}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
