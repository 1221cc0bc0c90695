"""Main CLI entry point."""

import click

from frotafin.database.factories import create_sqlite_storage
from frotafin.domain.errors import PersistenceError
from frotafin.domain.ledger import LedgerStore
from frotafin.utils.logging_utils import configure_logging

# Import and register all commands at module level
from frotafin.cli.commands import (
    add,
    budget,
    cargo,
    category,
    company,
    fuel,
    import_cmd,
    maintenance,
    notifications,
    quote,
    report,
    suggest,
    sync,
    transaction,
    truck,
)


def _close_store(store: LedgerStore) -> None:
    store.close()
    for warning in store.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FROTAFIN_DB_PATH environment variable)",
    envvar="FROTAFIN_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """FrotaFin - Fleet bookkeeping for small trucking companies.

    Record freights, fuel fills, maintenance and supplier quotes, and see
    the realized income statement (DRE) and profitability per truck.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose=verbose)

    # Open the ledger only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        try:
            storage = create_sqlite_storage(database_path=db_path)
            storage.connect()
        except PersistenceError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        store = LedgerStore(storage)
        ctx.obj["store"] = store
        ctx.call_on_close(lambda: _close_store(store))


# Register all commands
category.register_commands(cli)
cargo.register_commands(cli)
truck.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
notifications.register_commands(cli)
fuel.register_commands(cli)
maintenance.register_commands(cli)
budget.register_commands(cli)
quote.register_commands(cli)
report.register_commands(cli)
import_cmd.register_commands(cli)
sync.register_commands(cli)
suggest.register_commands(cli)
company.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
