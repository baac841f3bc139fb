"""Charging station selection, charge-time estimates and schedules."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Protocol

from drone_dispatch.core.config import ChargingConfig, EnergyConfig, get_config
from drone_dispatch.core.errors import InvalidInput, NoStationAvailable
from drone_dispatch.core.models import (
    ChargingSchedule,
    GeoPoint,
    StationSnapshot,
    VehicleSnapshot,
    require_battery_level,
)

logger = logging.getLogger(__name__)


class StationRepository(Protocol):
    def stations_within(self, location: GeoPoint, radius_km: float) -> List[StationSnapshot]:
        """Stations within ``radius_km`` of ``location``, nearest first."""
        ...


def total_charging_power(station: StationSnapshot) -> float:
    """Charging power available now in kW (renewables at current output, grid at rated power)."""
    return station.solar.current_output_kw + station.wind.current_output_kw + station.grid.total_power_kw


def find_nearest_station(
    location: GeoPoint,
    stations: StationRepository,
    max_distance_km: Optional[float] = None,
    cfg: Optional[ChargingConfig] = None,
) -> StationSnapshot:
    """Best station for charging near ``location``.

    Proximity is the repository's job; among the first candidates that are
    active and have a free slot, the one with the most charging power wins.

    Raises:
        NoStationAvailable: when no candidate qualifies.
        InvalidInput: for a negative search radius.
    """
    cfg = cfg or get_config().charging
    if max_distance_km is None:
        max_distance_km = cfg.max_distance_km
    if not math.isfinite(max_distance_km) or max_distance_km < 0:
        raise InvalidInput("max_distance_km", max_distance_km, "Must be a finite non-negative distance")

    candidates = [
        s for s in stations.stations_within(location, max_distance_km)
        if s.is_active and s.capacity_available > 0
    ][: cfg.max_candidates]
    if not candidates:
        logger.warning("No charging station within %.1f km of %s", max_distance_km, location.as_tuple())
        raise NoStationAvailable(max_distance_km)

    best = candidates[0]
    for station in candidates[1:]:
        if total_charging_power(station) > total_charging_power(best):
            best = station
    logger.debug(
        "Station %s chosen from %d candidates (%.1f kW)",
        best.id, len(candidates), total_charging_power(best),
    )
    return best


def estimate_charging_minutes(
    current_battery: float,
    target_battery: float,
    station: StationSnapshot,
    cfg: Optional[ChargingConfig] = None,
) -> float:
    """Minutes to charge from ``current_battery`` to ``target_battery`` percent.

    Returns ``math.inf`` when the station delivers no power, and 0 when
    ``current_battery`` is already at or above ``target_battery``.
    """
    cfg = cfg or get_config().charging
    require_battery_level("current_battery", current_battery)
    require_battery_level("target_battery", target_battery)

    power = total_charging_power(station)
    if power == 0:
        return math.inf

    required_kwh = max(0.0, (target_battery - current_battery) / 100) * cfg.battery_capacity_kwh
    hours = required_kwh / (power * cfg.charging_efficiency)
    return hours * 60


def schedule_charging(
    vehicle: VehicleSnapshot,
    station: StationSnapshot,
    now: Optional[datetime] = None,
    cfg: Optional[ChargingConfig] = None,
    energy_cfg: Optional[EnergyConfig] = None,
) -> ChargingSchedule:
    """Charging intent to the optimal charge level.

    Nothing is mutated here; the caller moves the vehicle to ``charging`` and
    takes one slot from the station.
    """
    cfg = cfg or get_config().charging
    energy_cfg = energy_cfg or get_config().energy
    now = now or datetime.now(timezone.utc)

    target = energy_cfg.optimal_charge_level
    minutes = estimate_charging_minutes(vehicle.battery_level, target, station, cfg)
    completion = None if math.isinf(minutes) else now + timedelta(minutes=minutes)
    if completion is None:
        logger.warning("Station %s has no charging power; schedule is unbounded", station.id)

    return ChargingSchedule(
        vehicle_id=vehicle.id,
        station_id=station.id,
        current_battery=vehicle.battery_level,
        target_battery=target,
        estimated_minutes=minutes,
        estimated_completion_time=completion,
    )
