"""Lightweight geodesy helpers."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from drone_dispatch.core.models import GeoPoint


EARTH_RADIUS_KM = 6371.0
KM_PER_DEG_LAT = 111.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the great-circle distance in kilometres."""
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) * math.sin(dlat / 2)
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(dlng / 2) * math.sin(dlng / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: "GeoPoint", b: "GeoPoint") -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def path_length_km(points) -> float:
    """Sum of consecutive great-circle legs."""
    return sum(distance_km(p, q) for p, q in zip(points, points[1:]))


def bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return initial bearing from point 1 to point 2 in degrees 0-360."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlng = math.radians(lng2 - lng1)
    x = math.sin(dlng) * math.cos(lat2_r)
    y = math.cos(lat1_r) * math.sin(lat2_r) - math.sin(lat1_r) * math.cos(lat2_r) * math.cos(dlng)
    return (math.degrees(math.atan2(x, y)) + 360) % 360


def km_to_deg(lat: float, north_km: float, east_km: float) -> Tuple[float, float]:
    """Convert a (north, east) displacement in km to (dlat, dlng) degrees.

    Uses the flat approximation 1 deg latitude ~ 111 km, with longitude
    degrees shrinking by cos(latitude).
    """
    dlat = north_km / KM_PER_DEG_LAT
    dlng = east_km / (KM_PER_DEG_LAT * math.cos(math.radians(lat)))
    return dlat, dlng


def offset_lat_lng(lat: float, lng: float, north_km: float, east_km: float) -> Tuple[float, float]:
    dlat, dlng = km_to_deg(lat, north_km, east_km)
    return lat + dlat, lng + dlng


def interpolate_lat_lng(
    lat1: float, lng1: float, lat2: float, lng2: float, fraction: float
) -> Tuple[float, float]:
    """Linear interpolation in lat/lng space (not along the great circle)."""
    return lat1 + (lat2 - lat1) * fraction, lng1 + (lng2 - lng1) * fraction


def midpoint_lat_lng(lat1: float, lng1: float, lat2: float, lng2: float) -> Tuple[float, float]:
    return (lat1 + lat2) / 2, (lng1 + lng2) / 2


def local_xy_km(lat: float, lng: float, origin_lat: float, origin_lng: float) -> Tuple[float, float]:
    """Project a point onto a flat km plane centred on the origin (x east, y north)."""
    x = (lng - origin_lng) * KM_PER_DEG_LAT * math.cos(math.radians(origin_lat))
    y = (lat - origin_lat) * KM_PER_DEG_LAT
    return x, y
