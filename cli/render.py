from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def _format_optional(value: Any) -> str:
    return "-" if value is None else str(value)


def render_rooms(rooms: Iterable[Dict[str, Any]]) -> None:
    echo_heading("Rooms")
    rooms = list(rooms)
    if not rooms:
        typer.echo("No rooms defined.")
        return
    for room in rooms:
        typer.echo(f"  {room.get('id')}: {room.get('name')}")


def render_readings(readings: Iterable[Dict[str, Any]]) -> None:
    echo_heading("Readings")
    readings = list(readings)
    if not readings:
        typer.echo("No readings in range.")
        return
    for reading in readings:
        typer.echo(
            f"  {reading.get('recorded_at')}  room={reading.get('room_id')}"
            f"  temperature={reading.get('temperature')}"
            f"  humidity={_format_optional(reading.get('humidity'))}"
        )
    typer.echo()
    typer.echo(f"{len(readings)} reading(s)")
