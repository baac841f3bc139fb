"""API routers."""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from drone_dispatch.api.dependencies import (
    get_dispatcher,
    get_engine_config,
    get_obstacle_lookup,
    get_station_repository,
)
from drone_dispatch.api.schemas import (
    AssessmentResponse,
    AssessRequest,
    DispatchRequest,
    DispatchResponse,
    LegislativeModel,
    NearestStationRequest,
    RenewablesRequest,
    RenewablesResponse,
    RouteRequest,
    RouteResponse,
    ScheduleRequest,
    ScheduleResponse,
    SelectVehicleRequest,
    StationModel,
    VehicleModel,
)
from drone_dispatch.core.config import EngineConfig
from drone_dispatch.dispatch.repositories import InMemoryStationRepository
from drone_dispatch.dispatch.service import Dispatcher, TripRequest
from drone_dispatch.energy.battery import assess_battery, select_optimal_vehicle
from drone_dispatch.energy.charging import find_nearest_station, schedule_charging
from drone_dispatch.energy.renewables import monitor_renewable_energy
from drone_dispatch.routing.legislation import check_legislative_restrictions
from drone_dispatch.routing.obstacles import ObstacleLookup
from drone_dispatch.routing.planner import RouteOptions, plan_route

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/route", response_model=RouteResponse)
def route(
    req: RouteRequest,
    cfg: EngineConfig = Depends(get_engine_config),
    obstacles: ObstacleLookup = Depends(get_obstacle_lookup),
) -> RouteResponse:
    start, end = req.start.to_domain(), req.end.to_domain()
    options = RouteOptions(
        payload_kg=req.payload_kg,
        drone_type=req.drone_type,
        weather_sensitive=req.weather_sensitive,
    )
    planned = plan_route(start, end, options, obstacles, cfg.routing)
    verdict = check_legislative_restrictions(start, end)
    return RouteResponse.from_domain(planned, LegislativeModel(**asdict(verdict)))


@router.post("/battery/assess", response_model=AssessmentResponse)
def battery_assess(req: AssessRequest, cfg: EngineConfig = Depends(get_engine_config)) -> AssessmentResponse:
    assessment = assess_battery(req.vehicle.to_domain(), req.required_energy, cfg.energy)
    payload = asdict(assessment)
    payload["recommendation"] = assessment.recommendation.value
    return AssessmentResponse(**payload)


@router.post("/vehicles/select", response_model=VehicleModel)
def vehicles_select(req: SelectVehicleRequest, cfg: EngineConfig = Depends(get_engine_config)) -> VehicleModel:
    chosen = select_optimal_vehicle([c.to_domain() for c in req.candidates], req.required_energy, cfg.energy)
    return VehicleModel.from_domain(chosen)


@router.post("/stations/nearest", response_model=StationModel)
def stations_nearest(
    req: NearestStationRequest,
    cfg: EngineConfig = Depends(get_engine_config),
    stations: InMemoryStationRepository = Depends(get_station_repository),
) -> StationModel:
    station = find_nearest_station(req.location.to_domain(), stations, req.max_distance_km, cfg.charging)
    return StationModel.from_domain(station)


@router.post("/charging/schedule", response_model=ScheduleResponse)
def charging_schedule(req: ScheduleRequest, cfg: EngineConfig = Depends(get_engine_config)) -> ScheduleResponse:
    schedule = schedule_charging(req.vehicle.to_domain(), req.station.to_domain(), cfg=cfg.charging, energy_cfg=cfg.energy)
    return ScheduleResponse(
        vehicle_id=schedule.vehicle_id,
        station_id=schedule.station_id,
        current_battery=schedule.current_battery,
        target_battery=schedule.target_battery,
        # JSON has no infinity
        estimated_minutes=None if schedule.is_unbounded else schedule.estimated_minutes,
        estimated_completion_time=schedule.estimated_completion_time,
        is_unbounded=schedule.is_unbounded,
    )


@router.post("/stations/renewables", response_model=RenewablesResponse)
def stations_renewables(req: RenewablesRequest) -> RenewablesResponse:
    return RenewablesResponse(**monitor_renewable_energy(req.station.to_domain()).to_dict())


@router.post("/dispatch", response_model=DispatchResponse)
def dispatch(req: DispatchRequest, dispatcher: Dispatcher = Depends(get_dispatcher)) -> DispatchResponse:
    assignment = dispatcher.request_trip(
        TripRequest(
            start=req.start.to_domain(),
            end=req.end.to_domain(),
            payload_kg=req.payload_kg,
            service_level=req.service_level,
        )
    )
    return DispatchResponse(
        vehicle=VehicleModel.from_domain(assignment.vehicle),
        route=RouteResponse.from_domain(assignment.route),
        estimated_cost=assignment.estimated_cost,
        restrictions=assignment.verdict.restrictions,
    )
