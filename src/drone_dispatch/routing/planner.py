"""Route planning: waypoints, pruning and energy/time/safety metrics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from drone_dispatch.core.config import RoutingConfig, get_config
from drone_dispatch.core.errors import InvalidInput
from drone_dispatch.core.geodesy import distance_km, path_length_km
from drone_dispatch.core.models import GeoPoint, Route
from drone_dispatch.routing.obstacles import NoObstacles, ObstacleLookup
from drone_dispatch.routing.simplify import prune_waypoints
from drone_dispatch.routing.waypoints import generate_waypoints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteOptions:
    payload_kg: float = 0.0
    drone_type: str = "standard"
    weather_sensitive: bool = True

    def __post_init__(self) -> None:
        if self.payload_kg is None or self.payload_kg < 0:
            raise InvalidInput("payload_kg", self.payload_kg, "Must not be negative")


def _payload_fraction(payload_kg: float, cfg: RoutingConfig) -> float:
    return payload_kg / cfg.payload_reference_kg


def estimate_flight_duration(distance: float, payload_kg: float = 0.0, cfg: Optional[RoutingConfig] = None) -> float:
    """Minutes of flight; payload derates the base speed linearly."""
    cfg = cfg or get_config().routing
    effective_speed = cfg.base_speed_kmh / (1 + _payload_fraction(payload_kg, cfg) * cfg.payload_speed_derate)
    return (distance / effective_speed) * 60


def calculate_energy_requirement(distance: float, payload_kg: float = 0.0, cfg: Optional[RoutingConfig] = None) -> float:
    """Battery percent consumed over ``distance`` km."""
    cfg = cfg or get_config().routing
    payload_factor = 1 + _payload_fraction(payload_kg, cfg) * cfg.payload_consumption_factor
    return distance * cfg.base_consumption_pct_per_km * payload_factor


def calculate_safety_score(waypoints: Sequence[GeoPoint], cfg: Optional[RoutingConfig] = None) -> float:
    cfg = cfg or get_config().routing
    score = 100 - max(0, (len(waypoints) - cfg.safety_free_waypoints) * cfg.safety_penalty_per_waypoint)
    return max(0, min(100, score))


class RoutePlanner:
    """Plans routes against an obstacle lookup.

    Holds no state besides its collaborators, so one instance can serve
    concurrent callers.
    """

    def __init__(self, obstacles: Optional[ObstacleLookup] = None, config: Optional[RoutingConfig] = None):
        self.obstacles = obstacles or NoObstacles()
        self.config = config or get_config().routing

    def plan(self, start: GeoPoint, end: GeoPoint, options: Optional[RouteOptions] = None) -> Route:
        options = options or RouteOptions()
        cfg = self.config

        direct = distance_km(start, end)
        obstacles = self.obstacles.obstacles_between(start, end)
        raw = generate_waypoints(
            start,
            end,
            obstacles,
            spacing_km=cfg.waypoint_spacing_km,
            default_radius_km=cfg.default_avoidance_radius_km,
        )
        waypoints = prune_waypoints(raw, cfg.prune_tolerance_km)

        total = path_length_km(waypoints)
        efficiency = (direct / total) * 100 if total > 0 else 100.0

        route = Route(
            waypoints=tuple(waypoints),
            distance_km=total,
            direct_distance_km=direct,
            duration_minutes=estimate_flight_duration(total, options.payload_kg, cfg),
            energy_required_percent=calculate_energy_requirement(total, options.payload_kg, cfg),
            path_efficiency_percent=efficiency,
            safety_score=calculate_safety_score(waypoints, cfg),
        )
        logger.debug(
            "Planned route %s -> %s: %d obstacles, %d/%d waypoints kept, %.2f km, %.1f%% energy",
            start.as_tuple(), end.as_tuple(), len(obstacles), len(waypoints), len(raw),
            route.distance_km, route.energy_required_percent,
        )
        return route


def plan_route(
    start: GeoPoint,
    end: GeoPoint,
    options: Optional[RouteOptions] = None,
    obstacles: Optional[ObstacleLookup] = None,
    config: Optional[RoutingConfig] = None,
) -> Route:
    return RoutePlanner(obstacles, config).plan(start, end, options)
