from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

import typer

from .client import MVG, stations_only
from .config import Settings, load_settings
from .errors import DecodeError, InvalidRequestTarget, MVGError, UnexpectedStatus
from .formatting import format_connection, format_departure, format_location, format_station
from .models import Station
from .urls import RoutingOptions

logger = logging.getLogger(__name__)

app = typer.Typer(help="Query MVG stations, departures and connections.")

# Failures of an id lookup that mean "this is not a station id". Transport
# errors are not among them and are reported instead of masked.
ID_LOOKUP_MISSES = (InvalidRequestTarget, UnexpectedStatus, DecodeError)


def _setup(config_file: Optional[Path]) -> Settings:
    settings = load_settings(config_file)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _client(settings: Settings) -> MVG:
    return MVG(timeout=settings.timeout_seconds)


@contextmanager
def _reported_errors() -> Iterator[None]:
    try:
        yield
    except MVGError as e:
        logger.debug("Request failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _echo_json(payload) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def resolve_station(mvg: MVG, search: str) -> Optional[Station]:
    """Find a station by id, falling back to a name search.

    Only failures that mean "not a known id" trigger the fallback.
    """
    try:
        locations = mvg.stations_by_id(search)
    except ID_LOOKUP_MISSES as e:
        logger.debug("Id lookup for %r failed (%s), searching by name", search, e)
        locations = mvg.stations_by_name(search)
    stations = stations_only(locations)
    return stations[0] if stations else None


def _require_station(mvg: MVG, search: str) -> Station:
    station = resolve_station(mvg, search)
    if station is None:
        typer.echo(f"No station found for {search!r}", err=True)
        raise typer.Exit(code=1)
    return station


@app.command()
def show_config(config_file: Path = typer.Option(None, help="Path to YAML config file")):
    """Print the effective configuration (YAML + env overrides)."""
    settings = load_settings(config_file)
    _echo_json(settings.model_dump(mode="json"))


@app.command()
def stations(
    search: str = typer.Argument("", help="Station name or part of it"),
    json_out: bool = typer.Option(False, help="Print JSON output"),
    config_file: Path = typer.Option(None, help="Path to YAML config file"),
):
    """Search stations by name."""
    settings = _setup(config_file)
    with _reported_errors(), _client(settings) as mvg:
        found = stations_only(mvg.stations_by_name(search))
    if json_out:
        _echo_json([s.to_wire() for s in found])
        return
    for s in found:
        typer.echo(format_station(s))


@app.command()
def departures(
    search: Optional[str] = typer.Argument(None, help="Station id or name; defaults to default_station"),
    limit: int = typer.Option(20, help="Maximum number of departures to print"),
    json_out: bool = typer.Option(False, help="Print JSON output"),
    config_file: Path = typer.Option(None, help="Path to YAML config file"),
):
    """Print the next departures at a station."""
    settings = _setup(config_file)
    search = search or settings.default_station
    if not search:
        raise typer.BadParameter("no station given and no default_station configured")
    with _reported_errors(), _client(settings) as mvg:
        station = _require_station(mvg, search)
        deps = mvg.departures_by_id(station.id)
    if json_out:
        _echo_json([d.to_wire() for d in deps[:limit]])
        return
    typer.echo(f"Departures at station {format_station(station)}:")
    for d in deps[:limit]:
        typer.echo(format_departure(d, settings.color_option))


@app.command()
def routes(
    origin: str = typer.Argument(..., help="Origin station id or name"),
    destination: str = typer.Argument(..., help="Destination station id or name"),
    time: Optional[datetime] = typer.Option(None, help="Departure (or arrival) time"),
    arrival: bool = typer.Option(False, help="Interpret --time as arrival time"),
    max_walk_start: Optional[int] = typer.Option(None, help="Max minutes walking to the first station"),
    max_walk_dest: Optional[int] = typer.Option(None, help="Max minutes walking from the last station"),
    change_limit: Optional[int] = typer.Option(None, help="Max number of changes"),
    ubahn: bool = typer.Option(True, "--ubahn/--no-ubahn"),
    bus: bool = typer.Option(True, "--bus/--no-bus"),
    tram: bool = typer.Option(True, "--tram/--no-tram"),
    sbahn: bool = typer.Option(True, "--sbahn/--no-sbahn"),
    json_out: bool = typer.Option(False, help="Print JSON output"),
    config_file: Path = typer.Option(None, help="Path to YAML config file"),
):
    """Print connections between two stations."""
    settings = _setup(config_file)
    options = RoutingOptions(
        time=time,
        arrival=arrival,
        max_walk_time_to_start=max_walk_start,
        max_walk_time_to_dest=max_walk_dest,
        change_limit=change_limit,
        ubahn=ubahn,
        bus=bus,
        tram=tram,
        sbahn=sbahn,
    )
    with _reported_errors(), _client(settings) as mvg:
        start = _require_station(mvg, origin)
        end = _require_station(mvg, destination)
        conns = mvg.connections(start.id, end.id, options)
    if json_out:
        _echo_json([c.to_wire() for c in conns])
        return
    if not conns:
        typer.echo(f"No connections from {format_station(start)} to {format_station(end)}")
        return
    typer.echo(f"Connections from {format_station(start)} to {format_station(end)}:")
    for c in conns:
        typer.echo(format_connection(c))


@app.command()
def nearby(
    latitude: float = typer.Argument(...),
    longitude: float = typer.Argument(...),
    json_out: bool = typer.Option(False, help="Print JSON output"),
    config_file: Path = typer.Option(None, help="Path to YAML config file"),
):
    """List locations near a coordinate."""
    settings = _setup(config_file)
    with _reported_errors(), _client(settings) as mvg:
        found = mvg.nearby_stations(latitude, longitude)
    if json_out:
        _echo_json([loc.to_wire() for loc in found])
        return
    for loc in found:
        typer.echo(format_location(loc))


if __name__ == "__main__":
    app()
