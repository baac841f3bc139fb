"""Battery feasibility: route assessment, vehicle selection and solar top-up."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from drone_dispatch.core.config import EnergyConfig, get_config
from drone_dispatch.core.errors import InvalidInput, NoSuitableVehicle
from drone_dispatch.core.models import BatteryAssessment, Recommendation, VehicleSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Weather:
    """Conditions relevant to solar charging, in percent."""
    cloud_cover_percent: float = 0.0
    sunlight_percent: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("cloud_cover_percent", "sunlight_percent"):
            value = getattr(self, name)
            if value is not None and not (math.isfinite(value) and 0 <= value <= 100):
                raise InvalidInput(name, value, "Percentage outside [0, 100]")


def _require_energy(required_energy: float) -> None:
    if required_energy is None or not math.isfinite(required_energy) or required_energy < 0:
        raise InvalidInput("required_energy", required_energy, "Must be a finite non-negative percentage")


def battery_recommendation(current_level: float, total_required: float, cfg: Optional[EnergyConfig] = None) -> Recommendation:
    """First matching threshold wins; the hard charging threshold takes precedence."""
    cfg = cfg or get_config().energy
    if current_level < cfg.charging_threshold:
        return Recommendation.CHARGE_REQUIRED
    if current_level < total_required:
        return Recommendation.INSUFFICIENT_FOR_ROUTE
    if current_level < total_required + cfg.recommended_buffer:
        return Recommendation.CHARGE_RECOMMENDED
    return Recommendation.SUFFICIENT


def assess_battery(vehicle: VehicleSnapshot, required_energy: float, cfg: Optional[EnergyConfig] = None) -> BatteryAssessment:
    """Check whether ``vehicle`` can fly a route needing ``required_energy`` percent."""
    cfg = cfg or get_config().energy
    _require_energy(required_energy)

    current = vehicle.battery_level
    total_required = required_energy + cfg.safety_margin
    return BatteryAssessment(
        has_sufficient=current >= total_required,
        current_level=current,
        required_energy=required_energy,
        safety_margin=cfg.safety_margin,
        total_required=total_required,
        estimated_remaining_after_flight=current - required_energy,
        needs_charging=current < cfg.charging_threshold,
        recommendation=battery_recommendation(current, total_required, cfg),
    )


def battery_status(vehicle: VehicleSnapshot, cfg: Optional[EnergyConfig] = None) -> BatteryAssessment:
    """Standing health check against a small probe requirement."""
    cfg = cfg or get_config().energy
    return assess_battery(vehicle, cfg.status_probe_energy, cfg)


def select_optimal_vehicle(
    candidates: Sequence[VehicleSnapshot],
    required_energy: float,
    cfg: Optional[EnergyConfig] = None,
) -> VehicleSnapshot:
    """Pick the vehicle whose battery is closest to required + preferred surplus.

    Only vehicles covering the requirement plus the safety margin qualify.
    Preferring the closest match rather than the fullest battery spreads wear
    across the fleet. Ties keep input order.

    Raises:
        NoSuitableVehicle: when no candidate qualifies.
    """
    cfg = cfg or get_config().energy
    _require_energy(required_energy)

    threshold = required_energy + cfg.safety_margin
    suitable = [v for v in candidates if v.battery_level >= threshold]
    if not suitable:
        logger.warning(
            "No vehicle among %d candidates has %.1f%% battery", len(candidates), threshold
        )
        raise NoSuitableVehicle(required_energy, len(candidates))

    ideal = required_energy + cfg.preferred_surplus
    best = sorted(suitable, key=lambda v: abs(v.battery_level - ideal))[0]
    logger.debug(
        "Selected vehicle %s (battery %.1f%%, ideal %.1f%%) from %d suitable",
        best.id, best.battery_level, ideal, len(suitable),
    )
    return best


def calculate_solar_charging_rate(
    vehicle: VehicleSnapshot,
    weather: Optional[Weather] = None,
    cfg: Optional[EnergyConfig] = None,
) -> float:
    """Solar top-up rate in percent per hour."""
    cfg = cfg or get_config().energy
    if not vehicle.has_solar_panels:
        return 0.0

    weather = weather or Weather()
    sunlight = weather.sunlight_percent
    if sunlight is None:
        sunlight = cfg.default_sunlight_percent
    weather_factor = ((100 - weather.cloud_cover_percent) / 100) * (sunlight / 100)
    return max(0.0, cfg.solar_base_rate_pct_per_hour * weather_factor)
