"""Confirm entries suggested by a text analyzer."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.cli.formatting import money
from frotafin.domain.entities import FuelRecord
from frotafin.domain.errors import DomainError
from frotafin.domain.suggestion import (
    EntryAnalyzer,
    EntrySuggestion,
    ReplyAnalyzer,
    confirm_suggestion,
    parse_suggestion,
)

_LABELS = (
    ("type", "Type"),
    ("amount", "Amount"),
    ("description", "Description"),
    ("date", "Date"),
    ("truck_plate", "Truck"),
    ("category_name", "Category"),
    ("client", "Client"),
    ("mileage", "KM"),
    ("liters", "Liters"),
    ("price_per_liter", "Price/L"),
    ("start_km", "Start KM"),
    ("end_km", "End KM"),
    ("weight", "Weight"),
    ("volume", "Volume"),
    ("cargo_type_name", "Cargo"),
)


def _show(suggestion: EntrySuggestion) -> None:
    for attr, label in _LABELS:
        value = getattr(suggestion, attr)
        if value is None:
            continue
        click.echo(f"  {label}: {money(value) if attr == 'amount' else value}")


@click.command("suggest")
@click.argument("reply", type=click.File("r", encoding="utf-8"))
@click.option(
    "--previous",
    type=click.File("r", encoding="utf-8"),
    help="Earlier incomplete reply that REPLY answers",
)
@click.option("--yes", is_flag=True, help="Record without asking for confirmation")
@click.pass_context
def suggest(ctx, reply, previous, yes: bool):
    """Review and record an analyzer reply (JSON file, or - for stdin).

    Incomplete replies print the analyzer's follow-up question instead.
    """
    store = ctx.obj["store"]
    analyzer: EntryAnalyzer = ctx.obj.get("analyzer") or ReplyAnalyzer()
    try:
        earlier = parse_suggestion(previous.read()) if previous else None
        suggestion = analyzer.analyze(reply.read(), store.snapshot, previous=earlier)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not suggestion.is_complete:
        click.echo(suggestion.ai_feedback or "The entry is incomplete.")
        ctx.exit(2)

    click.echo("\nSuggested entry:")
    _show(suggestion)
    if not yes and not click.confirm("Record this entry?"):
        click.echo("Entry discarded.")
        return

    try:
        recorded = confirm_suggestion(store, suggestion)
    except DomainError as e:
        handle_domain_error(ctx, e)
    kind = "fuel record" if isinstance(recorded, FuelRecord) else "transaction"
    click.echo(f"Recorded {kind} {recorded.id}")


def register_commands(cli):
    """Register suggest command with main CLI."""
    cli.add_command(suggest)
