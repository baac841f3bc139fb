import pytest
from fastapi.testclient import TestClient

from drone_dispatch.api import dependencies
from drone_dispatch.api.main import app
from drone_dispatch.core.config import EngineConfig
from drone_dispatch.core.models import GeoPoint, PowerSource, StationSnapshot, VehicleSnapshot
from drone_dispatch.dispatch import Dispatcher, InMemoryFleetRepository, InMemoryStationRepository
from drone_dispatch.routing.legislation import StaticLegislativeCheck
from drone_dispatch.routing.obstacles import NoObstacles

CFG = EngineConfig()
START = {"lat": 50.0755, "lng": 14.4378}
END = {"lat": 50.0875, "lng": 14.4214}


def _vehicle_json(vid: str, battery: float) -> dict:
    return {
        "id": vid,
        "battery_level": battery,
        "max_range_km": 40,
        "max_payload_kg": 5,
        "max_speed_kmh": 60,
    }


def _station_json(grid_kw: float = 0.0) -> dict:
    return {
        "id": "dock",
        "location": {"lat": 50.08, "lng": 14.43},
        "capacity_total": 4,
        "capacity_available": 2,
        "solar": {"count": 2, "total_power_kw": 20, "current_output_kw": 14},
        "wind": {"count": 1, "total_power_kw": 10, "current_output_kw": 3},
        "grid": {"count": 1, "total_power_kw": grid_kw},
    }


def _fleet() -> list:
    return [
        VehicleSnapshot(id=vid, battery_level=level, max_range_km=40, max_payload_kg=5, max_speed_kmh=60)
        for vid, level in (("a", 95), ("b", 60), ("c", 85))
    ]


def _stations() -> list:
    return [
        StationSnapshot(
            id="dock",
            location=GeoPoint(50.08, 14.43),
            capacity_total=2,
            capacity_available=1,
            grid=PowerSource(count=1, total_power_kw=22),
        )
    ]


@pytest.fixture
def client():
    app.dependency_overrides[dependencies.get_engine_config] = lambda: CFG
    app.dependency_overrides[dependencies.get_obstacle_lookup] = NoObstacles
    app.dependency_overrides[dependencies.get_station_repository] = lambda: InMemoryStationRepository(_stations())
    app.dependency_overrides[dependencies.get_dispatcher] = lambda: Dispatcher(
        InMemoryFleetRepository(_fleet()), InMemoryStationRepository(_stations()), config=CFG
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_route(client) -> None:
    resp = client.post("/route", json={"start": START, "end": END, "payload_kg": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["waypoints"][0]["lat"] == START["lat"]
    assert body["waypoints"][-1]["lng"] == END["lng"]
    assert body["distance_km"] >= body["direct_distance_km"]
    assert body["legislative"]["allowed"] is True
    assert len(body["legislative"]["restrictions"]) == 5


def test_route_rejects_bad_latitude(client) -> None:
    resp = client.post("/route", json={"start": {"lat": 95, "lng": 14.4}, "end": END})
    assert resp.status_code == 422
    assert resp.json()["error"] == "InvalidInput"


def test_battery_assess(client) -> None:
    resp = client.post("/battery/assess", json={"vehicle": _vehicle_json("v", 80), "required_energy": 30})
    assert resp.status_code == 200
    body = resp.json()
    assert body["has_sufficient"] is True
    assert body["total_required"] == 45
    assert body["recommendation"] == "SUFFICIENT"


def test_select_vehicle(client) -> None:
    candidates = [_vehicle_json("a", 95), _vehicle_json("b", 60), _vehicle_json("c", 85)]
    resp = client.post("/vehicles/select", json={"candidates": candidates, "required_energy": 40})
    assert resp.status_code == 200
    assert resp.json()["id"] == "b"


def test_select_vehicle_none_suitable(client) -> None:
    resp = client.post("/vehicles/select", json={"candidates": [_vehicle_json("a", 30)], "required_energy": 40})
    assert resp.status_code == 404
    assert resp.json()["error"] == "NoSuitableVehicle"


def test_nearest_station(client) -> None:
    resp = client.post("/stations/nearest", json={"location": START})
    assert resp.status_code == 200
    assert resp.json()["id"] == "dock"

    far = client.post("/stations/nearest", json={"location": {"lat": 10.0, "lng": 10.0}})
    assert far.status_code == 404


def test_schedule_without_power_is_unbounded(client) -> None:
    station = _station_json()
    station["solar"]["current_output_kw"] = 0
    station["wind"]["current_output_kw"] = 0
    resp = client.post("/charging/schedule", json={"vehicle": _vehicle_json("v", 40), "station": station})
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_unbounded"] is True
    assert body["estimated_minutes"] is None
    assert body["estimated_completion_time"] is None
    assert body["target_battery"] == 90


def test_schedule_with_power(client) -> None:
    resp = client.post("/charging/schedule", json={"vehicle": _vehicle_json("v", 40), "station": _station_json(22)})
    body = resp.json()
    assert body["is_unbounded"] is False
    # 25 kWh at 39 kW * 0.85
    assert body["estimated_minutes"] == pytest.approx(25 / (39 * 0.85) * 60)
    assert body["estimated_completion_time"] is not None


def test_renewables(client) -> None:
    resp = client.post("/stations/renewables", json={"station": _station_json(22)})
    body = resp.json()
    assert body["solar"]["efficiency"] == pytest.approx(70.0)
    assert body["wind"]["efficiency"] == pytest.approx(30.0)
    assert body["total"]["current"] == 17


def test_dispatch(client) -> None:
    resp = client.post("/dispatch", json={"start": START, "end": END})
    assert resp.status_code == 200
    body = resp.json()
    assert body["vehicle"]["id"] == "b"
    assert body["estimated_cost"] > 0
    assert len(body["restrictions"]) == 5


def test_dispatch_restricted(client) -> None:
    app.dependency_overrides[dependencies.get_dispatcher] = lambda: Dispatcher(
        InMemoryFleetRepository(_fleet()),
        InMemoryStationRepository([]),
        legislation=StaticLegislativeCheck(["Restricted airspace"], allowed=False),
        config=CFG,
    )
    resp = client.post("/dispatch", json={"start": START, "end": END})
    assert resp.status_code == 403
    assert resp.json()["restrictions"] == ["Restricted airspace"]


def test_dispatch_unknown_level(client) -> None:
    resp = client.post("/dispatch", json={"start": START, "end": END, "service_level": "gold"})
    assert resp.status_code == 422
