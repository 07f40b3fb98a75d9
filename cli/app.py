from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_report, render_stored
from logging_config import configure_logging
from services.ingest import build_default_ingest_service
from storage.station_store import StationFileStore


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Utilities for ingesting weather station XML into binary measurement files.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Ingest API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the API to respond.",
    ),
) -> None:
    """Entry point for the CLI."""
    ctx.obj = CLIState(config=load_config(base_url=base_url, timeout=timeout))


@app.command("ingest")
def ingest_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to an XML document."),
    base_path: Optional[Path] = typer.Option(
        None,
        "--base-path",
        help="Directory to store measurements under (defaults to WEATHER_DATA_ROOT).",
    ),
) -> None:
    """Parse a WEATHERDATA document and store each record locally."""
    service = build_default_ingest_service()
    try:
        report = service.ingest_file(file, base_path=str(base_path) if base_path else None)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    render_report(
        {
            "stored": report.stored,
            "paths": report.paths,
            "errors": [asdict(error) for error in report.errors],
        }
    )


@app.command("show")
def show_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a .dat file."),
) -> None:
    """Decode a stored measurement file and print its contents."""
    encoder = build_default_ingest_service().persister.encoder
    try:
        stored = encoder.decode(file.read_bytes())
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    render_stored(stored, encoder.tz)


@app.command("list")
def list_command(
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Directory to list (defaults to WEATHER_DATA_ROOT).",
    ),
) -> None:
    """List stored measurement files, one key per line."""
    store = build_default_ingest_service().persister.store if root is None else StationFileStore(root_path=root)
    keys = list(store.list_files())
    if not keys:
        typer.echo(f"No measurements stored under {store.root_path}.")
        return
    for key in keys:
        typer.echo(key)


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to an XML document."),
) -> None:
    """Send a WEATHERDATA document to the ingest service."""
    state = _get_state(ctx)
    typer.echo(f"Uploading {file} to {state.config.base_url} ...")
    client = ApiClient(state.config)
    try:
        payload = client.upload_document(file)
    finally:
        client.close()
    typer.secho(f"Upload accepted. stored={payload.get('stored')}", fg=typer.colors.GREEN)
    typer.echo()
    render_report(payload)


def run() -> None:
    """Console entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    run()
