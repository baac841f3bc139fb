"""Charging commands backed by a fleet/station snapshot file."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from drone_dispatch.api.dependencies import snapshot_path
from drone_dispatch.core.config import get_config
from drone_dispatch.core.errors import DispatchError, InvalidInput
from drone_dispatch.core.models import GeoPoint
from drone_dispatch.dispatch.repositories import InMemoryStationRepository, Snapshot, load_snapshot
from drone_dispatch.energy.charging import find_nearest_station, schedule_charging, total_charging_power
from drone_dispatch.energy.renewables import monitor_renewable_energy

app = typer.Typer(help="Charging station selection and schedules")


def load_cli_snapshot(path: Optional[Path]) -> Snapshot:
    path = path or snapshot_path(get_config())
    if path is None:
        raise InvalidInput("snapshot", None, "No snapshot file given or configured")
    return load_snapshot(path)


@app.command()
def nearest(
    location: str = typer.Argument(..., help="lat,lng"),
    max_distance: Optional[float] = typer.Option(None, "--max-distance", help="Search radius in km"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Fleet/station YAML"),
) -> None:
    """Pick the charging station with the most power near a location."""
    cfg = get_config()
    try:
        repo = InMemoryStationRepository(load_cli_snapshot(snapshot).stations)
        station = find_nearest_station(GeoPoint.parse(location), repo, max_distance, cfg.charging)
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{station.id} {station.name} ({total_charging_power(station):.1f} kW, "
               f"{station.capacity_available}/{station.capacity_total} free)")


@app.command()
def schedule(
    vehicle_id: str = typer.Argument(..., help="Vehicle id from the snapshot"),
    at: Optional[str] = typer.Option(None, "--at", help="lat,lng if the snapshot has no vehicle location"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Fleet/station YAML"),
) -> None:
    """Compute a charging schedule for a vehicle at its best nearby station."""
    cfg = get_config()
    try:
        data = load_cli_snapshot(snapshot)
        vehicle = next((v for v in data.vehicles if v.id == vehicle_id), None)
        if vehicle is None:
            raise InvalidInput("vehicle_id", vehicle_id, "Unknown vehicle")
        location = GeoPoint.parse(at) if at else vehicle.location
        if location is None:
            raise InvalidInput("location", None, "Vehicle has no location; pass --at")
        station = find_nearest_station(location, InMemoryStationRepository(data.stations), cfg=cfg.charging)
        plan = schedule_charging(vehicle, station, cfg=cfg.charging, energy_cfg=cfg.energy)
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps({
        "vehicle_id": plan.vehicle_id,
        "station_id": plan.station_id,
        "current_battery": plan.current_battery,
        "target_battery": plan.target_battery,
        "estimated_minutes": None if plan.is_unbounded else round(plan.estimated_minutes, 1),
        "estimated_completion_time": (
            plan.estimated_completion_time.isoformat() if plan.estimated_completion_time else None
        ),
    }, indent=2))


@app.command()
def renewables(
    station_id: str = typer.Argument(..., help="Station id from the snapshot"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Fleet/station YAML"),
) -> None:
    """Show renewable generation efficiency for a station."""
    try:
        station = next((s for s in load_cli_snapshot(snapshot).stations if s.id == station_id), None)
        if station is None:
            raise InvalidInput("station_id", station_id, "Unknown station")
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(monitor_renewable_energy(station).to_dict(), indent=2))
