from __future__ import annotations

from datetime import tzinfo
from typing import Any, Dict, Iterable, Optional

import typer

from services.encoder import StoredMeasurement


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_report(payload: Dict[str, Any]) -> None:
    echo_heading("Ingest Result")
    echo_key_values([("stored", payload.get("stored"))])

    paths = payload.get("paths") or []
    for path in paths:
        typer.echo(f"  - {path}")

    errors = payload.get("errors") or []
    typer.echo()
    echo_heading("Skipped Records")
    if errors:
        for error in errors:
            typer.echo(f"  - record {error.get('record_number')}: {error.get('reason')}")
    else:
        typer.echo("No records skipped.")


def render_stored(stored: StoredMeasurement, tz: Optional[tzinfo] = None) -> None:
    echo_heading(f"Station {stored.station}")
    echo_key_values(
        [
            ("datetime", f"{stored.timestamp(tz):%Y-%m-%d %H:%M:%S} ({stored.epoch_seconds})"),
            ("temperature", stored.temperature),
            ("dewpoint", stored.dewpoint),
            ("fallen_snow", stored.fallen_snow),
            ("precipitation", stored.precipitation),
            ("visibility", stored.visibility),
            ("overcast", stored.overcast),
            ("sea_air_pressure", stored.sea_air_pressure),
            ("station_air_pressure", stored.station_air_pressure),
        ]
    )
    active = [name for name, flag in stored.events._asdict().items() if flag]
    typer.echo(f"events: {', '.join(active) if active else 'none'}")
