"""No-fly zone lookup collaborators."""
from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from shapely.geometry import LineString, Point

from drone_dispatch.core.geodesy import local_xy_km, midpoint_lat_lng
from drone_dispatch.core.models import GeoPoint, Obstacle

logger = logging.getLogger(__name__)


class ObstacleLookup(Protocol):
    def obstacles_between(self, start: GeoPoint, end: GeoPoint) -> List[Obstacle]:
        ...


class NoObstacles:
    """Lookup for open airspace; never reports a zone."""

    def obstacles_between(self, start: GeoPoint, end: GeoPoint) -> List[Obstacle]:
        return []


class StaticObstacleLookup:
    """Fixed list of circular no-fly zones.

    A zone is reported when its circle comes within its radius of the straight
    start-end segment. Geometry is evaluated on a flat km plane centred on the
    segment midpoint, which is accurate enough at drone trip scales.
    """

    def __init__(self, zones: Sequence[Obstacle], default_radius_km: float = 1.0):
        self.zones = list(zones)
        self.default_radius_km = default_radius_km

    def obstacles_between(self, start: GeoPoint, end: GeoPoint) -> List[Obstacle]:
        if not self.zones:
            return []
        mid_lat, mid_lng = midpoint_lat_lng(start.lat, start.lng, end.lat, end.lng)
        a = local_xy_km(start.lat, start.lng, mid_lat, mid_lng)
        b = local_xy_km(end.lat, end.lng, mid_lat, mid_lng)
        path = LineString([a, b]) if a != b else Point(a)

        hits: List[Obstacle] = []
        for zone in self.zones:
            center = Point(local_xy_km(zone.center.lat, zone.center.lng, mid_lat, mid_lng))
            radius = zone.effective_radius_km(self.default_radius_km)
            if path.distance(center) <= radius:
                hits.append(zone)
        logger.debug("%d of %d no-fly zones near route", len(hits), len(self.zones))
        return hits
