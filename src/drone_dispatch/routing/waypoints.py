"""Waypoint generation: fixed-spacing interpolation or obstacle offsetting."""
from __future__ import annotations

import math
from typing import List, Sequence

from drone_dispatch.core.geodesy import (
    distance_km,
    interpolate_lat_lng,
    midpoint_lat_lng,
    offset_lat_lng,
)
from drone_dispatch.core.models import GeoPoint, Obstacle


def interpolated_waypoints(start: GeoPoint, end: GeoPoint, spacing_km: float = 5.0) -> List[GeoPoint]:
    """Start, evenly spaced interior points, end.

    Segment count is ``ceil(direct / spacing)``; interior points are linear in
    lat/lng, not along the great circle.
    """
    segments = math.ceil(distance_km(start, end) / spacing_km)
    points = [start]
    for i in range(1, segments):
        lat, lng = interpolate_lat_lng(start.lat, start.lng, end.lat, end.lng, i / segments)
        points.append(GeoPoint(lat, lng))
    points.append(end)
    return points


def avoidance_point(start: GeoPoint, end: GeoPoint, obstacle: Obstacle, default_radius_km: float = 1.0) -> GeoPoint:
    """Midpoint of start/end pushed north-east by the obstacle radius.

    The offset point is not checked against the obstacle itself.
    """
    mid_lat, mid_lng = midpoint_lat_lng(start.lat, start.lng, end.lat, end.lng)
    radius = obstacle.effective_radius_km(default_radius_km)
    lat, lng = offset_lat_lng(mid_lat, mid_lng, radius, radius)
    return GeoPoint(lat, lng)


def avoidance_waypoints(
    start: GeoPoint,
    end: GeoPoint,
    obstacles: Sequence[Obstacle],
    default_radius_km: float = 1.0,
) -> List[GeoPoint]:
    return [start] + [avoidance_point(start, end, o, default_radius_km) for o in obstacles] + [end]


def generate_waypoints(
    start: GeoPoint,
    end: GeoPoint,
    obstacles: Sequence[Obstacle],
    spacing_km: float = 5.0,
    default_radius_km: float = 1.0,
) -> List[GeoPoint]:
    # Exclusive strategies: interpolation only when the path is clear.
    if not obstacles:
        return interpolated_waypoints(start, end, spacing_km)
    return avoidance_waypoints(start, end, obstacles, default_radius_km)
