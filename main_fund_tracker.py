"""Mini README: Entry point CLI for the fund collection tracker.

Commands:
    * run - start the FastAPI application under uvicorn.
    * init-db - prepare the configured collection store.
    * summary - print totals and progress for one collection.

Settings are read from ``FUNDTRACKER_`` environment variables (or ``.env``)
and command line options override the host and port.
"""

from __future__ import annotations

import typer
import uvicorn

from fundtracker.configuration import get_settings
from fundtracker.funds import FundManager
from fundtracker.ledger import LedgerError, PaymentStatus
from fundtracker.logging_utils import configure_root_logger, level_for_environment
from fundtracker.storage import create_store

cli = typer.Typer(help="Launch and manage the fund collection tracker.")


def _manager() -> FundManager:
    settings = get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    return FundManager(create_store(settings), settings)


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # Browsers cannot navigate to the 0.0.0.0 wildcard, so suggest loopback instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting fund tracker on {effective_host}:{effective_port} "
        f"using the {settings.storage_backend} store.\n"
        f"API available at http://{browser_host}:{effective_port}/api/collections"
    )
    uvicorn.run(
        "fundtracker.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("init-db")
def init_db() -> None:
    """Create the backing store if needed and list its tables."""

    manager = _manager()
    tables = manager.initialise()
    if not tables:
        typer.echo(f"The {manager.settings.storage_backend} store has no tables to create.")
        return
    typer.echo(f"Database initialized successfully: {', '.join(tables)}")


@cli.command()
def summary(collection_id: str = typer.Argument(..., help="Collection identifier.")) -> None:
    """Print pledged, paid and remaining totals for a collection."""

    manager = _manager()
    symbol = manager.settings.currency_symbol
    try:
        manager.initialise()
        collection = manager.get_collection(collection_id)
        totals = manager.summarise(collection_id)
    except LedgerError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(f"{collection.name} ({len(collection.contributors)} contributors)")
    typer.echo(f"  Pledged:   {symbol}{totals.total_amount:,.2f}")
    typer.echo(f"  Paid:      {symbol}{totals.total_paid:,.2f}")
    typer.echo(f"  Remaining: {symbol}{totals.total_remaining:,.2f}")
    typer.echo(f"  Progress:  {totals.progress_percent}%")
    for status in PaymentStatus:
        typer.echo(f"  {status.label}: {totals.count_by_status[status]}")


if __name__ == "__main__":
    cli()
