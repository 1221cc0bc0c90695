"""Spreadsheet import command."""

import click

from frotafin.domain.csv_import import SpreadsheetImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import transactions from a spreadsheet saved as CSV.

    Recognized columns: Data, Execucao, Descricao, Valor, Categoria, Placa,
    Tipo, Status, Vencimento and Subcategoria (or Cliente / Fornecedor).
    English Date, Description and Amount are accepted too.
    """
    store = ctx.obj["store"]
    service = SpreadsheetImportService(store)

    try:
        result = service.import_csv(csv_file)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Skipped: {result['skipped']} rows with zero amount")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
