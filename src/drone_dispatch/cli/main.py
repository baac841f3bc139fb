"""Typer CLI for route planning, dispatch and charging."""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from drone_dispatch.cli import charge_cmd, route_cmd
from drone_dispatch.core.config import default_config_path, get_config
from drone_dispatch.core.errors import DispatchError, RestrictedRoute
from drone_dispatch.core.logging_config import configure
from drone_dispatch.core.models import GeoPoint, ServiceLevel
from drone_dispatch.dispatch import (
    Dispatcher,
    InMemoryFleetRepository,
    InMemoryStationRepository,
    TripRequest,
)
from drone_dispatch.routing.obstacles import StaticObstacleLookup

app = typer.Typer(help="Energy-aware drone routing and dispatch")
app.add_typer(route_cmd.app, name="route")
app.add_typer(charge_cmd.app, name="charge")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    config: Optional[Path] = typer.Option(None, "--config", help="Engine config YAML"),
) -> None:
    configure(log_level)
    if config is not None:
        get_config(config)


@app.command()
def dispatch(
    start: str = typer.Argument(..., help="start lat,lng"),
    end: str = typer.Argument(..., help="end lat,lng"),
    payload: float = typer.Option(0.0, "--payload", "-p", help="Payload in kg"),
    level: ServiceLevel = typer.Option(ServiceLevel.LEVEL1, "--level", help="Service level"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Fleet/station YAML"),
) -> None:
    """Plan a trip and pick a vehicle from the snapshot fleet."""
    cfg = get_config()
    try:
        data = charge_cmd.load_cli_snapshot(snapshot)
        dispatcher = Dispatcher(
            fleet=InMemoryFleetRepository(data.vehicles),
            stations=InMemoryStationRepository(data.stations),
            obstacles=StaticObstacleLookup(data.no_fly_zones, cfg.routing.default_avoidance_radius_km),
            config=cfg,
        )
        assignment = dispatcher.request_trip(
            TripRequest(GeoPoint.parse(start), GeoPoint.parse(end), payload_kg=payload, service_level=level)
        )
    except RestrictedRoute as exc:
        typer.echo(f"Error: {exc}", err=True)
        for restriction in exc.restrictions:
            typer.echo(f"  - {restriction}", err=True)
        raise typer.Exit(1)
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps({
        "vehicle_id": assignment.vehicle.id,
        "battery_level": assignment.vehicle.battery_level,
        "estimated_cost": assignment.estimated_cost,
        "route": route_cmd.route_feature(assignment.route),
        "restrictions": assignment.verdict.restrictions,
    }, indent=2))


@app.command()
def info() -> None:
    """Show the effective engine configuration."""
    typer.echo(f"Config file: {default_config_path()}")
    typer.echo(json.dumps(asdict(get_config()), indent=2))


if __name__ == "__main__":
    app()
