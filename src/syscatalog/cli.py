"""Command line interface for syscatalog."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from syscatalog.config import AppConfig
from syscatalog.exceptions import IngestionError
from syscatalog.ingestion.archive import extract
from syscatalog.ingestion.manifest import parse
from syscatalog.web.app import create_app


console = Console()
app = typer.Typer(help="syscatalog - package catalog built from inventory archives")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def inspect(
    archive: Path = typer.Argument(
        ..., help="Inventory archive (.tar.gz) to read.", exists=True, dir_okay=False
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the system id and package list contained in an archive."""
    _setup_logging(verbose)
    try:
        with archive.open("rb") as handle:
            entry = parse(extract(handle))
    except IngestionError as exc:
        console.print(f"[red]{exc.__class__.__name__}: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(f"System [bold]{entry.system_id.strip()}[/bold]")
    if not entry.components:
        console.print("[yellow]No components found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Epoch")
    table.add_column("Version")
    table.add_column("Release")
    table.add_column("Arch")
    table.add_column("Vendor")

    for component in entry.components:
        table.add_row(
            component.name,
            component.epoch,
            component.version,
            component.release,
            component.arch,
            component.vendor,
        )

    console.print(table)
    console.print(f"{len(entry.components)} components")


@app.command()
def serve(
    host: str = typer.Option(AppConfig().host, help="Host interface"),
    port: int = typer.Option(AppConfig().port, help="Server port"),
    max_upload_bytes: int = typer.Option(
        AppConfig().max_upload_bytes, help="Largest accepted upload in bytes"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Start the upload and listing server."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    _setup_logging(verbose)
    try:
        config = AppConfig(host=host, port=port, max_upload_bytes=max_upload_bytes)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(f"Starting server on http://{config.host}:{config.port}")
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        reload=False,
        log_level="debug" if verbose else "info",
    )


if __name__ == "__main__":  # pragma: no cover
    app()
