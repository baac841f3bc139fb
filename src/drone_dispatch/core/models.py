"""Immutable snapshots and value types shared by the engine."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from drone_dispatch.core.errors import InvalidInput


def _require_finite(name: str, value: float) -> None:
    if value is None or not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidInput(name, value, "Expected a finite number")


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise InvalidInput(name, value, "Must not be negative")


def require_battery_level(name: str, value: float) -> None:
    _require_finite(name, value)
    if not 0 <= value <= 100:
        raise InvalidInput(name, value, "Battery level outside [0, 100]")


class VehicleStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    CHARGING = "charging"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class ServiceLevel(str, Enum):
    LEVEL1 = "level1"
    LEVEL2 = "level2"
    LEVEL3 = "level3"


class Recommendation(str, Enum):
    CHARGE_REQUIRED = "CHARGE_REQUIRED"
    INSUFFICIENT_FOR_ROUTE = "INSUFFICIENT_FOR_ROUTE"
    CHARGE_RECOMMENDED = "CHARGE_RECOMMENDED"
    SUFFICIENT = "SUFFICIENT"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A position in decimal degrees, optionally with altitude in metres."""

    lat: float
    lng: float
    altitude_m: Optional[float] = None

    def __post_init__(self) -> None:
        _require_finite("lat", self.lat)
        _require_finite("lng", self.lng)
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidInput("lat", self.lat, "Latitude outside [-90, 90]")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidInput("lng", self.lng, "Longitude outside [-180, 180]")
        if self.altitude_m is not None:
            _require_finite("altitude_m", self.altitude_m)

    @classmethod
    def parse(cls, text: str) -> "GeoPoint":
        """Parse ``"lat,lng"`` as typed on the command line."""
        parts = text.split(",")
        if len(parts) != 2:
            raise InvalidInput("point", text, "Expected 'lat,lng'")
        try:
            lat, lng = (float(p) for p in parts)
        except ValueError:
            raise InvalidInput("point", text, "Expected 'lat,lng'") from None
        return cls(lat, lng)

    def as_tuple(self) -> Tuple[float, float]:
        return self.lat, self.lng


@dataclass(frozen=True, slots=True)
class Obstacle:
    """Circular no-fly zone. ``radius_km`` of None or 0 falls back to the default radius."""

    center: GeoPoint
    radius_km: Optional[float] = None

    def __post_init__(self) -> None:
        if self.radius_km is not None:
            _require_non_negative("radius_km", self.radius_km)

    def effective_radius_km(self, default_km: float) -> float:
        return self.radius_km or default_km


@dataclass(frozen=True, slots=True)
class Route:
    """A planned flight path and its metrics. Never mutated after planning."""

    waypoints: Tuple[GeoPoint, ...]
    distance_km: float
    direct_distance_km: float
    duration_minutes: float
    energy_required_percent: float
    path_efficiency_percent: float
    safety_score: float

    @property
    def start(self) -> GeoPoint:
        return self.waypoints[0]

    @property
    def end(self) -> GeoPoint:
        return self.waypoints[-1]


@dataclass(frozen=True, slots=True)
class VehicleSnapshot:
    """Read-only view of a fleet vehicle supplied by the caller."""

    id: str
    battery_level: float
    max_range_km: float
    max_payload_kg: float
    max_speed_kmh: float
    has_solar_panels: bool = True
    status: VehicleStatus = VehicleStatus.AVAILABLE
    service_level: ServiceLevel = ServiceLevel.LEVEL1
    location: Optional[GeoPoint] = None

    def __post_init__(self) -> None:
        require_battery_level("battery_level", self.battery_level)
        _require_non_negative("max_range_km", self.max_range_km)
        _require_non_negative("max_payload_kg", self.max_payload_kg)
        _require_non_negative("max_speed_kmh", self.max_speed_kmh)
        # Accept plain strings from YAML/JSON loaders.
        object.__setattr__(self, "status", VehicleStatus(self.status))
        object.__setattr__(self, "service_level", ServiceLevel(self.service_level))


@dataclass(frozen=True, slots=True)
class PowerSource:
    count: int = 0
    total_power_kw: float = 0.0
    current_output_kw: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative("count", self.count)
        _require_non_negative("total_power_kw", self.total_power_kw)
        _require_non_negative("current_output_kw", self.current_output_kw)


@dataclass(frozen=True, slots=True)
class StationSnapshot:
    """Read-only view of a dock station supplied by the caller."""

    id: str
    location: GeoPoint
    capacity_total: int
    capacity_available: int
    solar: PowerSource = field(default_factory=PowerSource)
    wind: PowerSource = field(default_factory=PowerSource)
    grid: PowerSource = field(default_factory=PowerSource)
    is_active: bool = True
    name: str = ""

    def __post_init__(self) -> None:
        _require_non_negative("capacity_total", self.capacity_total)
        _require_non_negative("capacity_available", self.capacity_available)
        if self.capacity_available > self.capacity_total:
            raise InvalidInput(
                "capacity_available", self.capacity_available, "Exceeds capacity_total"
            )


@dataclass(frozen=True, slots=True)
class BatteryAssessment:
    has_sufficient: bool
    current_level: float
    required_energy: float
    safety_margin: float
    total_required: float
    estimated_remaining_after_flight: float
    needs_charging: bool
    recommendation: Recommendation


@dataclass(frozen=True, slots=True)
class ChargingSchedule:
    """Charging intent; the caller applies the state transitions."""

    vehicle_id: str
    station_id: str
    current_battery: float
    target_battery: float
    estimated_minutes: float
    estimated_completion_time: Optional[datetime]

    @property
    def is_unbounded(self) -> bool:
        return math.isinf(self.estimated_minutes)
