"""CLI helpers for resolving references and parsing typed input.

Each helper either returns the parsed value or prints ``Error: ...`` and
exits with status 1, so error messaging stays consistent across commands.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from frotafin.domain.entities import CargoType, Category, Truck
from frotafin.domain.ledger import LedgerStore
from frotafin.utils.amount_parser import parse_amount
from frotafin.utils.date_parser import parse_date
from frotafin.utils.resolvers import resolve_cargo_type, resolve_category, resolve_truck


def resolve_truck_or_exit(ctx: click.Context, store: LedgerStore, truck: str) -> Truck:
    """Resolve a truck ID or plate, or exit with a CLI error."""
    try:
        return resolve_truck(store.snapshot, truck)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(ctx: click.Context, store: LedgerStore, category: str) -> Category:
    """Resolve a category ID or name, or exit with a CLI error."""
    try:
        return resolve_category(store.snapshot, category)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_cargo_type_or_exit(
    ctx: click.Context, store: LedgerStore, cargo_type: str
) -> CargoType:
    """Resolve a cargo type ID or name, or exit with a CLI error."""
    try:
        return resolve_cargo_type(store.snapshot, cargo_type)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str | None, label: str = "amount") -> Decimal | None:
    """Parse an optional amount option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)


def parse_date_or_exit(
    ctx: click.Context, store: LedgerStore, value: str | None, label: str = "date"
) -> date | None:
    """Parse an optional date option relative to the store clock, or exit."""
    if value is None:
        return None
    try:
        return parse_date(value, today=store.today())
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)
