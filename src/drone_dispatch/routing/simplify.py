"""Waypoint pruning helpers."""
from __future__ import annotations

from typing import List, Sequence

from drone_dispatch.core.geodesy import distance_km
from drone_dispatch.core.models import GeoPoint


def detour_km(prev: GeoPoint, current: GeoPoint, nxt: GeoPoint) -> float:
    """Extra distance flown by going prev -> current -> next instead of prev -> next."""
    via = distance_km(prev, current) + distance_km(current, nxt)
    return via - distance_km(prev, nxt)


def prune_waypoints(points: Sequence[GeoPoint], tolerance_km: float = 0.5) -> List[GeoPoint]:
    """Drop interior waypoints whose detour is within ``tolerance_km``.

    ``prev`` is the last kept point while ``next`` is the following original
    point, so a run of near-collinear points collapses onto its endpoints.
    First and last points are always kept.

    Args:
        points: Ordered waypoints, start first.
        tolerance_km: Detours at or below this are considered unnecessary.

    Returns:
        The kept waypoints in order.
    """
    if len(points) <= 2:
        return list(points)

    kept = [points[0]]
    for i in range(1, len(points) - 1):
        if detour_km(kept[-1], points[i], points[i + 1]) > tolerance_km:
            kept.append(points[i])
    kept.append(points[-1])
    return kept
