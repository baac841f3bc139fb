import pytest

from drone_dispatch.core.config import EnergyConfig
from drone_dispatch.core.errors import InvalidInput, NoSuitableVehicle
from drone_dispatch.core.models import Recommendation, VehicleSnapshot
from drone_dispatch.energy.battery import (
    Weather,
    assess_battery,
    battery_status,
    calculate_solar_charging_rate,
    select_optimal_vehicle,
)

CFG = EnergyConfig()


def _vehicle(vid: str = "v", battery: float = 50, solar: bool = True) -> VehicleSnapshot:
    return VehicleSnapshot(
        id=vid,
        battery_level=battery,
        max_range_km=40,
        max_payload_kg=5,
        max_speed_kmh=60,
        has_solar_panels=solar,
    )


def test_sufficient_battery() -> None:
    assessment = assess_battery(_vehicle(battery=80), 30, CFG)
    assert assessment.has_sufficient
    assert assessment.total_required == 45
    assert assessment.safety_margin == 15
    assert assessment.estimated_remaining_after_flight == 50
    assert not assessment.needs_charging
    assert assessment.recommendation is Recommendation.SUFFICIENT


def test_insufficient_for_route() -> None:
    assessment = assess_battery(_vehicle(battery=30), 40, CFG)
    assert not assessment.has_sufficient
    assert assessment.recommendation is Recommendation.INSUFFICIENT_FOR_ROUTE


def test_charge_recommended_inside_buffer() -> None:
    assessment = assess_battery(_vehicle(battery=50), 30, CFG)
    assert assessment.has_sufficient
    assert assessment.recommendation is Recommendation.CHARGE_RECOMMENDED


def test_charging_threshold_takes_precedence() -> None:
    assessment = assess_battery(_vehicle(battery=10), 0, CFG)
    assert assessment.needs_charging
    assert assessment.recommendation is Recommendation.CHARGE_REQUIRED

    low = assess_battery(_vehicle(battery=19.9), 50, CFG)
    assert low.recommendation is Recommendation.CHARGE_REQUIRED


def test_battery_status_uses_probe_energy() -> None:
    status = battery_status(_vehicle(battery=50), CFG)
    assert status.required_energy == 10
    assert status.recommendation is Recommendation.SUFFICIENT


def test_negative_requirement_rejected() -> None:
    with pytest.raises(InvalidInput):
        assess_battery(_vehicle(), -5, CFG)
    with pytest.raises(InvalidInput):
        select_optimal_vehicle([_vehicle()], -5, CFG)


def test_select_prefers_battery_closest_to_ideal_surplus() -> None:
    candidates = [_vehicle("a", 95), _vehicle("b", 60), _vehicle("c", 85)]
    chosen = select_optimal_vehicle(candidates, 40, CFG)
    assert chosen.id == "b"
    assert chosen.battery_level >= 55


def test_select_filters_on_safety_margin() -> None:
    candidates = [_vehicle("a", 54.9), _vehicle("b", 55)]
    assert select_optimal_vehicle(candidates, 40, CFG).id == "b"


def test_select_tie_keeps_input_order() -> None:
    candidates = [_vehicle("high", 70), _vehicle("low", 60)]
    assert select_optimal_vehicle(candidates, 40, CFG).id == "high"
    assert select_optimal_vehicle(list(reversed(candidates)), 40, CFG).id == "low"


def test_select_raises_when_nobody_qualifies() -> None:
    with pytest.raises(NoSuitableVehicle) as excinfo:
        select_optimal_vehicle([_vehicle("a", 30), _vehicle("b", 40)], 40, CFG)
    assert excinfo.value.candidates == 2
    with pytest.raises(NoSuitableVehicle):
        select_optimal_vehicle([], 10, CFG)


def test_solar_rate() -> None:
    assert calculate_solar_charging_rate(_vehicle(solar=False), cfg=CFG) == 0
    assert calculate_solar_charging_rate(_vehicle(), cfg=CFG) == pytest.approx(4.0)
    assert calculate_solar_charging_rate(
        _vehicle(), Weather(cloud_cover_percent=50, sunlight_percent=100), CFG
    ) == pytest.approx(2.5)
    assert calculate_solar_charging_rate(_vehicle(), Weather(sunlight_percent=0), CFG) == 0
    assert calculate_solar_charging_rate(_vehicle(), Weather(cloud_cover_percent=100), CFG) == 0


def test_weather_percentages_validated() -> None:
    with pytest.raises(InvalidInput):
        Weather(cloud_cover_percent=120)
