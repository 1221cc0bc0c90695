"""Cloud sync commands."""

import click

from frotafin.cli.error_handling import handle_domain_error
from frotafin.domain.errors import DomainError
from frotafin.domain.sync import SyncService
from frotafin.remote.factories import BACKENDS, create_remote_store, default_sync_key

backend_option = click.option(
    "--backend",
    type=click.Choice(BACKENDS, case_sensitive=False),
    envvar="FROTAFIN_SYNC_BACKEND",
    help="Where the data lives (overrides FROTAFIN_SYNC_BACKEND; default: file)",
)
key_option = click.option(
    "--key", help="Sync key: file, basket or repository path (default: FROTAFIN_SYNC_KEY or 'frotafin')"
)


def _service(ctx: click.Context, backend: str | None, key: str | None) -> SyncService:
    try:
        remote = create_remote_store(backend)
        ctx.call_on_close(remote.close)
        return SyncService(ctx.obj["store"], remote, key or default_sync_key())
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group()
def sync_group():
    """Back up or restore all data through a sync backend."""
    pass


@sync_group.command("push")
@backend_option
@key_option
@click.pass_context
def push(ctx, backend: str | None, key: str | None):
    """Upload all local data, replacing the remote copy."""
    service = _service(ctx, backend, key)
    try:
        summary = service.upload()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Uploaded {summary.transactions} transactions, {summary.fuel_records} fuel records "
        f"and {summary.trucks} trucks to '{summary.key}' via {service.remote.name}"
    )


@sync_group.command("pull")
@backend_option
@key_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def pull(ctx, backend: str | None, key: str | None, yes: bool):
    """Replace all local data with the remote copy."""
    service = _service(ctx, backend, key)
    if not yes and not click.confirm("This replaces all local data. Continue?"):
        click.echo("Restore cancelled.")
        return
    try:
        summary = service.download()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Restored {summary.transactions} transactions, {summary.fuel_records} fuel records "
        f"and {summary.trucks} trucks from '{summary.key}' via {service.remote.name}"
    )


@sync_group.command("status")
@click.pass_context
def status(ctx):
    """Show when data was last synced."""
    store = ctx.obj["store"]
    last_sync = store.snapshot.last_sync
    click.echo(f"Last sync: {last_sync}" if last_sync else "Never synced.")


def register_commands(cli):
    """Register sync commands with main CLI."""
    cli.add_command(sync_group, name="sync")
