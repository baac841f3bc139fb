"""Route planning commands."""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from drone_dispatch.api.dependencies import snapshot_path
from drone_dispatch.core.config import get_config
from drone_dispatch.core.errors import DispatchError
from drone_dispatch.core.geodesy import bearing_deg
from drone_dispatch.core.models import GeoPoint, Route
from drone_dispatch.dispatch.repositories import load_snapshot
from drone_dispatch.routing.legislation import check_legislative_restrictions
from drone_dispatch.routing.obstacles import NoObstacles, StaticObstacleLookup
from drone_dispatch.routing.planner import RouteOptions, plan_route

app = typer.Typer(help="Plan drone routes")


def route_feature(route: Route) -> dict:
    return {
        "type": "Feature",
        "properties": {
            "distance_km": route.distance_km,
            "direct_distance_km": route.direct_distance_km,
            "duration_minutes": route.duration_minutes,
            "energy_required_percent": route.energy_required_percent,
            "path_efficiency_percent": route.path_efficiency_percent,
            "safety_score": route.safety_score,
            "initial_bearing_deg": bearing_deg(
                route.start.lat, route.start.lng, route.waypoints[1].lat, route.waypoints[1].lng
            ),
        },
        "geometry": {
            "type": "LineString",
            "coordinates": [[p.lng, p.lat] for p in route.waypoints],
        },
    }


@app.command()
def plan(
    start: str = typer.Argument(..., help="start lat,lng"),
    end: str = typer.Argument(..., help="end lat,lng"),
    payload: float = typer.Option(0.0, "--payload", "-p", help="Payload in kg"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="YAML file with no-fly zones"),
    no_zones: bool = typer.Option(False, "--no-zones", help="Ignore configured no-fly zones"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Path to save GeoJSON"),
) -> None:
    """Plan a route and print it as a GeoJSON feature."""
    cfg = get_config()
    try:
        start_pt, end_pt = GeoPoint.parse(start), GeoPoint.parse(end)
        lookup = NoObstacles()
        path = snapshot or snapshot_path(cfg)
        if not no_zones and path is not None:
            lookup = StaticObstacleLookup(load_snapshot(path).no_fly_zones, cfg.routing.default_avoidance_radius_km)
        route = plan_route(start_pt, end_pt, RouteOptions(payload_kg=payload), lookup, cfg.routing)
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    feature = route_feature(route)
    if output:
        output.write_text(json.dumps({"type": "FeatureCollection", "features": [feature]}, indent=2))
        typer.echo(f"Saved route to {output}")
    else:
        typer.echo(json.dumps(feature, indent=2))


@app.command()
def legislation(
    start: str = typer.Argument(..., help="start lat,lng"),
    end: str = typer.Argument(..., help="end lat,lng"),
) -> None:
    """Show the legislative verdict for a route."""
    try:
        verdict = check_legislative_restrictions(GeoPoint.parse(start), GeoPoint.parse(end))
    except DispatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(asdict(verdict), indent=2))
