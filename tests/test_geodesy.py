import math

import pytest

from drone_dispatch.core.geodesy import (
    bearing_deg,
    distance_km,
    haversine_km,
    interpolate_lat_lng,
    km_to_deg,
    path_length_km,
)
from drone_dispatch.core.models import GeoPoint

PRAGUE_A = GeoPoint(50.0755, 14.4378)
PRAGUE_B = GeoPoint(50.0875, 14.4214)
BRNO = GeoPoint(49.1951, 16.6068)


def test_distance_is_symmetric_and_zero_on_identity() -> None:
    assert distance_km(PRAGUE_A, BRNO) == pytest.approx(distance_km(BRNO, PRAGUE_A))
    assert distance_km(PRAGUE_A, PRAGUE_A) == 0.0


def test_triangle_inequality() -> None:
    points = [PRAGUE_A, PRAGUE_B, BRNO, GeoPoint(0.0, 0.0), GeoPoint(-33.9, 151.2)]
    for a in points:
        for b in points:
            for c in points:
                assert distance_km(a, c) <= distance_km(a, b) + distance_km(b, c) + 1e-9


def test_known_distances() -> None:
    assert 1.0 < distance_km(PRAGUE_A, PRAGUE_B) < 2.0
    # One degree of longitude on the equator.
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(2 * math.pi * 6371 / 360)
    assert 180 < distance_km(PRAGUE_A, BRNO) < 190


def test_path_length_sums_legs() -> None:
    via = [PRAGUE_A, PRAGUE_B, BRNO]
    assert path_length_km(via) == pytest.approx(distance_km(PRAGUE_A, PRAGUE_B) + distance_km(PRAGUE_B, BRNO))
    assert path_length_km([PRAGUE_A]) == 0


def test_bearing_cardinal_directions() -> None:
    assert bearing_deg(0, 0, 1, 0) == pytest.approx(0.0)
    assert bearing_deg(0, 0, 0, 1) == pytest.approx(90.0)
    assert bearing_deg(0, 0, -1, 0) == pytest.approx(180.0)


def test_km_to_deg_scales_longitude_by_latitude() -> None:
    dlat, dlng = km_to_deg(0.0, 111.0, 111.0)
    assert dlat == pytest.approx(1.0)
    assert dlng == pytest.approx(1.0)

    _, dlng_60 = km_to_deg(60.0, 0.0, 55.5)
    assert dlng_60 == pytest.approx(1.0)


def test_interpolation_is_linear_in_degrees() -> None:
    assert interpolate_lat_lng(10.0, 20.0, 12.0, 24.0, 0.25) == (10.5, 21.0)
