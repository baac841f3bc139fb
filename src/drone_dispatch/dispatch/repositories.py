"""Fleet and station snapshot repositories with check-and-set commits."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import yaml

from drone_dispatch.core.geodesy import distance_km
from drone_dispatch.core.models import (
    GeoPoint,
    Obstacle,
    PowerSource,
    ServiceLevel,
    StationSnapshot,
    VehicleSnapshot,
    VehicleStatus,
)

logger = logging.getLogger(__name__)


class FleetRepository(Protocol):
    def find_vehicles(
        self,
        status: VehicleStatus = VehicleStatus.AVAILABLE,
        service_level: Optional[ServiceLevel] = None,
        min_range_km: float = 0.0,
    ) -> List[VehicleSnapshot]:
        ...

    def commit_vehicle_assignment(self, vehicle_id: str) -> bool:
        """Atomically move an available vehicle to ``in_use``; False if it was taken."""
        ...

    def commit_vehicle_charging(self, vehicle_id: str, station_id: str) -> bool:
        ...


class ClaimingStationRepository(Protocol):
    def stations_within(self, location: GeoPoint, radius_km: float) -> List[StationSnapshot]:
        ...

    def commit_charging_claim(self, station_id: str, vehicle_id: str) -> bool:
        """Atomically take one free slot; False if none is left."""
        ...

    def release_charging_claim(self, station_id: str, vehicle_id: str) -> bool:
        """Give back a slot taken by ``commit_charging_claim``; False if none was held."""
        ...


class InMemoryFleetRepository:
    """Thread-safe fleet store backing the CLI, the API and tests."""

    def __init__(self, vehicles: List[VehicleSnapshot]):
        self._vehicles: Dict[str, VehicleSnapshot] = {v.id: v for v in vehicles}
        self._docked_at: Dict[str, str] = {}
        self._lock = threading.Lock()

    def all(self) -> List[VehicleSnapshot]:
        with self._lock:
            return list(self._vehicles.values())

    def get(self, vehicle_id: str) -> Optional[VehicleSnapshot]:
        with self._lock:
            return self._vehicles.get(vehicle_id)

    def docked_at(self, vehicle_id: str) -> Optional[str]:
        with self._lock:
            return self._docked_at.get(vehicle_id)

    def find_vehicles(
        self,
        status: VehicleStatus = VehicleStatus.AVAILABLE,
        service_level: Optional[ServiceLevel] = None,
        min_range_km: float = 0.0,
    ) -> List[VehicleSnapshot]:
        with self._lock:
            return [
                v for v in self._vehicles.values()
                if v.status == status
                and (service_level is None or v.service_level == service_level)
                and v.max_range_km >= min_range_km
            ]

    def _transition(self, vehicle_id: str, expected: VehicleStatus, new: VehicleStatus) -> bool:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            if vehicle is None or vehicle.status != expected:
                return False
            self._vehicles[vehicle_id] = replace(vehicle, status=new)
            return True

    def commit_vehicle_assignment(self, vehicle_id: str) -> bool:
        return self._transition(vehicle_id, VehicleStatus.AVAILABLE, VehicleStatus.IN_USE)

    def commit_vehicle_charging(self, vehicle_id: str, station_id: str) -> bool:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            if vehicle is None or vehicle.status in (VehicleStatus.CHARGING, VehicleStatus.IN_USE):
                return False
            self._vehicles[vehicle_id] = replace(vehicle, status=VehicleStatus.CHARGING)
            self._docked_at[vehicle_id] = station_id
            return True


class InMemoryStationRepository:
    """Thread-safe station store; proximity by great-circle distance."""

    def __init__(self, stations: List[StationSnapshot]):
        self._stations: Dict[str, StationSnapshot] = {s.id: s for s in stations}
        self._occupants: Dict[str, List[str]] = {s.id: [] for s in stations}
        self._lock = threading.Lock()

    def all(self) -> List[StationSnapshot]:
        with self._lock:
            return list(self._stations.values())

    def get(self, station_id: str) -> Optional[StationSnapshot]:
        with self._lock:
            return self._stations.get(station_id)

    def occupants(self, station_id: str) -> List[str]:
        with self._lock:
            return list(self._occupants.get(station_id, []))

    def stations_within(self, location: GeoPoint, radius_km: float) -> List[StationSnapshot]:
        with self._lock:
            stations = list(self._stations.values())
        ranked = sorted(
            ((distance_km(location, s.location), s) for s in stations),
            key=lambda pair: pair[0],
        )
        return [s for d, s in ranked if d <= radius_km]

    def commit_charging_claim(self, station_id: str, vehicle_id: str) -> bool:
        with self._lock:
            station = self._stations.get(station_id)
            if station is None or not station.is_active or station.capacity_available <= 0:
                return False
            self._stations[station_id] = replace(
                station, capacity_available=station.capacity_available - 1
            )
            self._occupants[station_id].append(vehicle_id)
            return True

    def release_charging_claim(self, station_id: str, vehicle_id: str) -> bool:
        with self._lock:
            station = self._stations.get(station_id)
            occupants = self._occupants.get(station_id, [])
            if station is None or vehicle_id not in occupants:
                return False
            occupants.remove(vehicle_id)
            self._stations[station_id] = replace(
                station, capacity_available=station.capacity_available + 1
            )
            return True


@dataclass
class Snapshot:
    vehicles: List[VehicleSnapshot] = field(default_factory=list)
    stations: List[StationSnapshot] = field(default_factory=list)
    no_fly_zones: List[Obstacle] = field(default_factory=list)


def _point(raw: dict) -> GeoPoint:
    altitude = raw.get("altitude_m")
    return GeoPoint(
        float(raw["lat"]),
        float(raw["lng"]),
        float(altitude) if altitude is not None else None,
    )


def _power(raw: Optional[dict]) -> PowerSource:
    raw = raw or {}
    return PowerSource(
        count=int(raw.get("count", 0)),
        total_power_kw=float(raw.get("total_power_kw", 0.0)),
        current_output_kw=float(raw.get("current_output_kw", 0.0)),
    )


def parse_vehicle(item: dict) -> VehicleSnapshot:
    location = item.get("location")
    return VehicleSnapshot(
        id=str(item["id"]),
        battery_level=float(item["battery_level"]),
        max_range_km=float(item["max_range_km"]),
        max_payload_kg=float(item["max_payload_kg"]),
        max_speed_kmh=float(item["max_speed_kmh"]),
        has_solar_panels=bool(item.get("has_solar_panels", True)),
        status=item.get("status", "available"),
        service_level=item.get("service_level", "level1"),
        location=_point(location) if location else None,
    )


def parse_station(item: dict) -> StationSnapshot:
    return StationSnapshot(
        id=str(item["id"]),
        name=str(item.get("name", "")),
        location=_point(item["location"]),
        capacity_total=int(item["capacity_total"]),
        capacity_available=int(item["capacity_available"]),
        solar=_power(item.get("solar")),
        wind=_power(item.get("wind")),
        grid=_power(item.get("grid")),
        is_active=bool(item.get("is_active", True)),
    )


def parse_obstacle(item: dict) -> Obstacle:
    radius = item.get("radius_km")
    return Obstacle(center=_point(item["center"]), radius_km=float(radius) if radius is not None else None)


def load_snapshot(path: Path) -> Snapshot:
    """Load vehicles, stations and no-fly zones from a YAML file."""
    if not path.exists():
        logger.warning("Snapshot %s not found; starting with an empty fleet", path)
        return Snapshot()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    snapshot = Snapshot(
        vehicles=[parse_vehicle(item) for item in data.get("vehicles", [])],
        stations=[parse_station(item) for item in data.get("stations", [])],
        no_fly_zones=[parse_obstacle(item) for item in data.get("no_fly_zones", [])],
    )
    logger.debug(
        "Loaded %d vehicles, %d stations, %d no-fly zones from %s",
        len(snapshot.vehicles), len(snapshot.stations), len(snapshot.no_fly_zones), path,
    )
    return snapshot
