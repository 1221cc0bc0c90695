"""Pending payment notifications."""

import click

from frotafin.cli.formatting import money
from frotafin.domain.entities import TransactionType
from frotafin.domain.reports import pending_transactions, truck_plate


@click.command("notifications")
@click.pass_context
def notifications(ctx):
    """List unpaid transactions whose due date has been reached.

    Use 'transaction pay ID' to settle one or 'transaction postpone ID' to be
    reminded again tomorrow.
    """
    store = ctx.obj["store"]
    snapshot = store.snapshot
    pending = pending_transactions(snapshot, store.today())
    if not pending:
        click.echo("No pending payments.")
        return

    click.echo(f"\n{len(pending)} pending item(s):")
    for txn in pending:
        title = (
            "Recebimento Pendente" if txn.type == TransactionType.REVENUE else "Pagamento Pendente"
        )
        line = f"  [{title}] {txn.due_date} {money(txn.amount)} {txn.description}"
        if txn.truck_id:
            line += f" ({truck_plate(snapshot, txn.truck_id)})"
        click.echo(line)
        click.echo(f"    id: {txn.id}")


def register_commands(cli):
    """Register notifications command with main CLI."""
    cli.add_command(notifications)
