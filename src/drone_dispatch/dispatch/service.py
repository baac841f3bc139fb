"""Trip and recharge flows wired against caller-owned repositories."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from drone_dispatch.core.config import EngineConfig, PricingConfig, get_config
from drone_dispatch.core.errors import AssignmentConflict, InvalidInput
from drone_dispatch.core.models import (
    ChargingSchedule,
    GeoPoint,
    Route,
    ServiceLevel,
    VehicleSnapshot,
    VehicleStatus,
)
from drone_dispatch.dispatch.repositories import ClaimingStationRepository, FleetRepository
from drone_dispatch.energy.battery import select_optimal_vehicle
from drone_dispatch.energy.charging import find_nearest_station, schedule_charging
from drone_dispatch.routing.legislation import (
    LegislativeCheck,
    LegislativeVerdict,
    StaticLegislativeCheck,
    ensure_route_allowed,
)
from drone_dispatch.routing.obstacles import ObstacleLookup
from drone_dispatch.routing.planner import RouteOptions, RoutePlanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TripRequest:
    start: GeoPoint
    end: GeoPoint
    payload_kg: float = 0.0
    service_level: ServiceLevel = ServiceLevel.LEVEL1


@dataclass(frozen=True)
class TripAssignment:
    route: Route
    vehicle: VehicleSnapshot
    verdict: LegislativeVerdict
    estimated_cost: int


def estimate_trip_cost(distance_km: float, service_level: ServiceLevel, cfg: Optional[PricingConfig] = None) -> int:
    """Whole currency units, rounded up."""
    cfg = cfg or get_config().pricing
    level = ServiceLevel(service_level).value
    if level not in cfg.level_multipliers:
        raise InvalidInput("service_level", level, "No price multiplier configured")
    return math.ceil(distance_km * cfg.base_cost_per_km * cfg.level_multipliers[level])


class Dispatcher:
    """Runs the trip and recharge flows.

    The engine calls only recommend; each flow ends in a check-and-set commit
    on the repository, and a lost race surfaces as AssignmentConflict.
    """

    def __init__(
        self,
        fleet: FleetRepository,
        stations: ClaimingStationRepository,
        obstacles: Optional[ObstacleLookup] = None,
        legislation: Optional[LegislativeCheck] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.fleet = fleet
        self.stations = stations
        self.legislation = legislation or StaticLegislativeCheck()
        self.config = config or get_config()
        self.planner = RoutePlanner(obstacles, self.config.routing)

    def request_trip(self, request: TripRequest) -> TripAssignment:
        route = self.planner.plan(request.start, request.end, RouteOptions(payload_kg=request.payload_kg))
        verdict = ensure_route_allowed(self.legislation.check(request.start, request.end))

        candidates = self.fleet.find_vehicles(
            status=VehicleStatus.AVAILABLE,
            service_level=request.service_level,
            min_range_km=route.distance_km,
        )
        vehicle = select_optimal_vehicle(candidates, route.energy_required_percent, self.config.energy)

        if not self.fleet.commit_vehicle_assignment(vehicle.id):
            logger.warning("Vehicle %s was assigned concurrently", vehicle.id)
            raise AssignmentConflict("vehicle", vehicle.id)

        cost = estimate_trip_cost(route.distance_km, request.service_level, self.config.pricing)
        logger.info(
            "Trip assigned to %s: %.2f km, %.1f%% energy, cost %d",
            vehicle.id, route.distance_km, route.energy_required_percent, cost,
        )
        return TripAssignment(route=route, vehicle=vehicle, verdict=verdict, estimated_cost=cost)

    def request_charging(
        self,
        vehicle: VehicleSnapshot,
        location: GeoPoint,
        max_distance_km: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> ChargingSchedule:
        station = find_nearest_station(location, self.stations, max_distance_km, self.config.charging)
        schedule = schedule_charging(vehicle, station, now, self.config.charging, self.config.energy)

        if not self.stations.commit_charging_claim(station.id, vehicle.id):
            logger.warning("Station %s ran out of slots concurrently", station.id)
            raise AssignmentConflict("station", station.id)
        if not self.fleet.commit_vehicle_charging(vehicle.id, station.id):
            self.stations.release_charging_claim(station.id, vehicle.id)
            logger.warning(
                "Vehicle %s could not be moved to charging; released slot at %s", vehicle.id, station.id
            )
            raise AssignmentConflict("vehicle", vehicle.id)

        logger.info(
            "Vehicle %s charging at %s for %.1f min", vehicle.id, station.id, schedule.estimated_minutes
        )
        return schedule
