"""API request and response models."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from drone_dispatch.core.models import (
    GeoPoint,
    PowerSource,
    Route,
    ServiceLevel,
    StationSnapshot,
    VehicleSnapshot,
    VehicleStatus,
)


class PointModel(BaseModel):
    lat: float = Field(..., description="Latitude in decimal degrees")
    lng: float = Field(..., description="Longitude in decimal degrees")
    altitude_m: Optional[float] = None

    def to_domain(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng, self.altitude_m)

    @classmethod
    def from_domain(cls, point: GeoPoint) -> "PointModel":
        return cls(lat=point.lat, lng=point.lng, altitude_m=point.altitude_m)


class VehicleModel(BaseModel):
    id: str
    battery_level: float = Field(..., description="State of charge in percent")
    max_range_km: float
    max_payload_kg: float
    max_speed_kmh: float
    has_solar_panels: bool = True
    status: VehicleStatus = VehicleStatus.AVAILABLE
    service_level: ServiceLevel = ServiceLevel.LEVEL1
    location: Optional[PointModel] = None

    def to_domain(self) -> VehicleSnapshot:
        return VehicleSnapshot(
            id=self.id,
            battery_level=self.battery_level,
            max_range_km=self.max_range_km,
            max_payload_kg=self.max_payload_kg,
            max_speed_kmh=self.max_speed_kmh,
            has_solar_panels=self.has_solar_panels,
            status=self.status,
            service_level=self.service_level,
            location=self.location.to_domain() if self.location else None,
        )

    @classmethod
    def from_domain(cls, vehicle: VehicleSnapshot) -> "VehicleModel":
        return cls(
            id=vehicle.id,
            battery_level=vehicle.battery_level,
            max_range_km=vehicle.max_range_km,
            max_payload_kg=vehicle.max_payload_kg,
            max_speed_kmh=vehicle.max_speed_kmh,
            has_solar_panels=vehicle.has_solar_panels,
            status=vehicle.status,
            service_level=vehicle.service_level,
            location=PointModel.from_domain(vehicle.location) if vehicle.location else None,
        )


class PowerSourceModel(BaseModel):
    count: int = 0
    total_power_kw: float = 0.0
    current_output_kw: float = 0.0


class StationModel(BaseModel):
    id: str
    name: str = ""
    location: PointModel
    capacity_total: int
    capacity_available: int
    solar: PowerSourceModel = Field(default_factory=PowerSourceModel)
    wind: PowerSourceModel = Field(default_factory=PowerSourceModel)
    grid: PowerSourceModel = Field(default_factory=PowerSourceModel)
    is_active: bool = True

    def to_domain(self) -> StationSnapshot:
        return StationSnapshot(
            id=self.id,
            name=self.name,
            location=self.location.to_domain(),
            capacity_total=self.capacity_total,
            capacity_available=self.capacity_available,
            solar=PowerSource(**self.solar.model_dump()),
            wind=PowerSource(**self.wind.model_dump()),
            grid=PowerSource(**self.grid.model_dump()),
            is_active=self.is_active,
        )

    @classmethod
    def from_domain(cls, station: StationSnapshot) -> "StationModel":
        return cls(
            id=station.id,
            name=station.name,
            location=PointModel.from_domain(station.location),
            capacity_total=station.capacity_total,
            capacity_available=station.capacity_available,
            solar=PowerSourceModel(**_power_dict(station.solar)),
            wind=PowerSourceModel(**_power_dict(station.wind)),
            grid=PowerSourceModel(**_power_dict(station.grid)),
            is_active=station.is_active,
        )


def _power_dict(source: PowerSource) -> dict:
    return {
        "count": source.count,
        "total_power_kw": source.total_power_kw,
        "current_output_kw": source.current_output_kw,
    }


class RouteRequest(BaseModel):
    start: PointModel
    end: PointModel
    payload_kg: float = Field(0.0, description="Cargo mass in kilograms")
    drone_type: str = "standard"
    weather_sensitive: bool = True


class LegislativeModel(BaseModel):
    allowed: bool
    restrictions: List[str] = []
    requires_permit: bool = False


class RouteResponse(BaseModel):
    waypoints: List[PointModel]
    distance_km: float
    direct_distance_km: float
    duration_minutes: float
    energy_required_percent: float
    path_efficiency_percent: float
    safety_score: float
    legislative: Optional[LegislativeModel] = None

    @classmethod
    def from_domain(cls, route: Route, legislative: Optional[LegislativeModel] = None) -> "RouteResponse":
        return cls(
            waypoints=[PointModel.from_domain(p) for p in route.waypoints],
            distance_km=route.distance_km,
            direct_distance_km=route.direct_distance_km,
            duration_minutes=route.duration_minutes,
            energy_required_percent=route.energy_required_percent,
            path_efficiency_percent=route.path_efficiency_percent,
            safety_score=route.safety_score,
            legislative=legislative,
        )


class AssessRequest(BaseModel):
    vehicle: VehicleModel
    required_energy: float = Field(..., description="Route energy in percent of battery")


class AssessmentResponse(BaseModel):
    has_sufficient: bool
    current_level: float
    required_energy: float
    safety_margin: float
    total_required: float
    estimated_remaining_after_flight: float
    needs_charging: bool
    recommendation: str


class SelectVehicleRequest(BaseModel):
    candidates: List[VehicleModel]
    required_energy: float


class NearestStationRequest(BaseModel):
    location: PointModel
    max_distance_km: Optional[float] = Field(None, description="Search radius; defaults to config")


class ScheduleRequest(BaseModel):
    vehicle: VehicleModel
    station: StationModel


class ScheduleResponse(BaseModel):
    vehicle_id: str
    station_id: str
    current_battery: float
    target_battery: float
    estimated_minutes: Optional[float] = Field(None, description="None when the station has no power")
    estimated_completion_time: Optional[datetime] = None
    is_unbounded: bool = False


class RenewablesRequest(BaseModel):
    station: StationModel


class GenerationModel(BaseModel):
    current: float
    capacity: float
    efficiency: float


class RenewablesResponse(BaseModel):
    solar: GenerationModel
    wind: GenerationModel
    total: GenerationModel


class DispatchRequest(BaseModel):
    start: PointModel
    end: PointModel
    payload_kg: float = 0.0
    service_level: ServiceLevel = ServiceLevel.LEVEL1


class DispatchResponse(BaseModel):
    vehicle: VehicleModel
    route: RouteResponse
    estimated_cost: int
    restrictions: List[str] = []
