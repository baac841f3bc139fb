import math
from datetime import datetime, timedelta, timezone

import pytest

from drone_dispatch.core.config import ChargingConfig, EnergyConfig
from drone_dispatch.core.errors import InvalidInput, NoStationAvailable
from drone_dispatch.core.models import GeoPoint, PowerSource, StationSnapshot, VehicleSnapshot
from drone_dispatch.energy.charging import (
    estimate_charging_minutes,
    find_nearest_station,
    schedule_charging,
    total_charging_power,
)
from drone_dispatch.energy.renewables import monitor_renewable_energy

CFG = ChargingConfig()
HERE = GeoPoint(50.08, 14.43)


def _station(sid: str, grid_kw: float = 0.0, solar=(0, 0), wind=(0, 0), available: int = 1, active: bool = True):
    return StationSnapshot(
        id=sid,
        location=HERE,
        capacity_total=max(available, 1),
        capacity_available=available,
        solar=PowerSource(count=1, total_power_kw=solar[0], current_output_kw=solar[1]),
        wind=PowerSource(count=1, total_power_kw=wind[0], current_output_kw=wind[1]),
        grid=PowerSource(count=1, total_power_kw=grid_kw),
        is_active=active,
    )


class _Repo:
    def __init__(self, stations):
        self.stations = stations
        self.calls = []

    def stations_within(self, location, radius_km):
        self.calls.append((location, radius_km))
        return list(self.stations)


def test_total_power_uses_current_renewables_and_rated_grid() -> None:
    station = _station("s", grid_kw=22, solar=(20, 14), wind=(10, 3))
    assert total_charging_power(station) == 39


def test_estimate_minutes() -> None:
    station = _station("s", grid_kw=10)
    assert estimate_charging_minutes(40, 90, station, CFG) == pytest.approx(25 / (10 * 0.85) * 60)
    assert estimate_charging_minutes(95, 90, station, CFG) == 0


def test_estimate_is_zero_at_or_above_target() -> None:
    for kw in (5, 10, 40):
        station = _station("s", grid_kw=kw)
        assert estimate_charging_minutes(90, 90, station, CFG) == 0
        assert estimate_charging_minutes(100, 90, station, CFG) == 0


def test_estimate_is_unbounded_without_power() -> None:
    assert estimate_charging_minutes(40, 90, _station("dark"), CFG) == math.inf


def test_estimate_decreases_with_power() -> None:
    minutes = [estimate_charging_minutes(20, 90, _station("s", grid_kw=kw), CFG) for kw in (5, 10, 20, 40)]
    assert all(math.isfinite(m) and m > 0 for m in minutes)
    assert minutes == sorted(minutes, reverse=True)
    assert len(set(minutes)) == len(minutes)


def test_estimate_rejects_bad_battery() -> None:
    with pytest.raises(InvalidInput):
        estimate_charging_minutes(-1, 90, _station("s", grid_kw=10), CFG)
    with pytest.raises(InvalidInput):
        estimate_charging_minutes(40, 101, _station("s", grid_kw=10), CFG)


def test_nearest_station_picks_most_power() -> None:
    repo = _Repo([
        _station("weak", grid_kw=5),
        _station("inactive", grid_kw=500, active=False),
        _station("full", grid_kw=500, available=0),
        _station("strong", grid_kw=30),
        _station("equal", grid_kw=30),
    ])
    chosen = find_nearest_station(HERE, repo, cfg=CFG)
    assert chosen.id == "strong"
    assert repo.calls == [(HERE, 50.0)]


def test_nearest_station_caps_candidates() -> None:
    stations = [_station(f"s{i}", grid_kw=10 + i) for i in range(5)] + [_station("late", grid_kw=1000)]
    assert find_nearest_station(HERE, _Repo(stations), 10, CFG).id == "s4"


def test_nearest_station_none_available() -> None:
    with pytest.raises(NoStationAvailable):
        find_nearest_station(HERE, _Repo([_station("full", grid_kw=10, available=0)]), cfg=CFG)
    with pytest.raises(InvalidInput):
        find_nearest_station(HERE, _Repo([]), -1, CFG)


def test_schedule_targets_optimal_level() -> None:
    vehicle = VehicleSnapshot(id="v1", battery_level=40, max_range_km=40, max_payload_kg=5, max_speed_kmh=60)
    station = _station("s1", grid_kw=10)
    now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)

    plan = schedule_charging(vehicle, station, now, CFG, EnergyConfig())

    assert plan.vehicle_id == "v1"
    assert plan.station_id == "s1"
    assert plan.current_battery == 40
    assert plan.target_battery == 90
    assert plan.estimated_minutes == pytest.approx(176.47, rel=1e-3)
    assert plan.estimated_completion_time == now + timedelta(minutes=plan.estimated_minutes)
    assert not plan.is_unbounded
    # Snapshots are untouched.
    assert vehicle.status.value == "available"
    assert station.capacity_available == 1


def test_schedule_unbounded_without_power() -> None:
    vehicle = VehicleSnapshot(id="v1", battery_level=40, max_range_km=40, max_payload_kg=5, max_speed_kmh=60)
    plan = schedule_charging(vehicle, _station("dark"), cfg=CFG, energy_cfg=EnergyConfig())
    assert plan.is_unbounded
    assert plan.estimated_completion_time is None


def test_renewable_report() -> None:
    station = _station("s", grid_kw=22, solar=(20, 14), wind=(10, 3))
    report = monitor_renewable_energy(station)
    assert report.solar.efficiency == pytest.approx(70.0)
    assert report.wind.efficiency == pytest.approx(30.0)
    assert report.total.current == 17
    assert report.total.capacity == 30
    assert report.total.efficiency == pytest.approx(17 / 30 * 100)


def test_renewable_report_without_capacity() -> None:
    report = monitor_renewable_energy(_station("grid-only", grid_kw=50))
    assert report.solar.efficiency == 0
    assert report.total.efficiency == 0
    assert report.to_dict()["total"] == {"current": 0, "capacity": 0, "efficiency": 0}
