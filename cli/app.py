from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_readings, render_rooms


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the birdroom climate service.",
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
        help="Service base URL (defaults to BIRDROOM_API_URL env or http://localhost:8000).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        help="Shared secret for adding readings (defaults to BIRD_API_KEY env).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, api_key=api_key, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("add")
def add_command(
    ctx: typer.Context,
    room_id: int = typer.Argument(..., min=1, max=26, help="Room identifier (1-26)."),
    temperature: float = typer.Argument(..., help="Temperature reading."),
    humidity: Optional[float] = typer.Option(None, "--humidity", help="Relative humidity."),
) -> None:
    """Record a single reading."""
    state = _get_state(ctx)
    state.client.add_reading(room_id, temperature, humidity)
    typer.secho(f"Reading stored for room {room_id}.", fg=typer.colors.GREEN)


@app.command("rooms")
def rooms_command(ctx: typer.Context) -> None:
    """List the known rooms."""
    state = _get_state(ctx)
    render_rooms(state.client.list_rooms())


@app.command("query")
def query_command(
    ctx: typer.Context,
    room_id: Optional[int] = typer.Option(None, "--room-id", "-r", help="Restrict to one room."),
    start: Optional[str] = typer.Option(
        None, "--start", help="Inclusive ISO-8601 UTC start, e.g. 2025-11-30T00:00:00Z."
    ),
    end: Optional[str] = typer.Option(None, "--end", help="Exclusive ISO-8601 UTC end."),
) -> None:
    """Show readings, oldest first. Without both bounds the last 24 hours are shown."""
    state = _get_state(ctx)
    if (start is None) != (end is None):
        typer.secho(
            "Only one bound given; the service will fall back to the last 24 hours.",
            fg=typer.colors.YELLOW,
            err=True,
        )
    render_readings(state.client.query_readings(room_id=room_id, start_time=start, end_time=end))


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to listen on."),
) -> None:
    """Run the HTTP service with uvicorn."""
    uvicorn.run("app.main:app", host=host, port=port)
