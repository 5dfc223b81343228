import dataclasses
import math

import pytest

from popdistance.core.geo import EARTH_MEAN_RADIUS_KM, Coordinate, great_circle_km
from popdistance.domain.errors import InvalidArgumentError, OutOfRangeError

NEW_YORK = Coordinate.from_degrees(40.7143528, -74.0059731)
CHICAGO = Coordinate.from_degrees(41.8781136, -87.6297982)


def test_distance_to_self_is_zero():
    for c in [NEW_YORK, CHICAGO, Coordinate.from_degrees(90, 0), Coordinate.from_degrees(-33.9, 151.2)]:
        assert great_circle_km(c, c) == pytest.approx(0.0, abs=1e-9)


def test_new_york_to_chicago():
    d = great_circle_km(NEW_YORK, CHICAGO)
    assert d == pytest.approx(1144.26, abs=0.5)
    assert round(d) == 1144


def test_distance_is_bitwise_symmetric():
    points = [
        NEW_YORK,
        CHICAGO,
        Coordinate.from_degrees(19.43, -99.13),
        Coordinate.from_degrees(-41.29, 174.78),
        Coordinate.from_degrees(64.13, -21.9),
        Coordinate.from_degrees(0, 180),
    ]
    for a in points:
        for b in points:
            assert great_circle_km(a, b) == great_circle_km(b, a)


def test_antipodal_points_are_half_circumference_apart():
    assert great_circle_km(Coordinate.from_degrees(0, 0), Coordinate.from_degrees(0, 180)) == pytest.approx(
        math.pi * EARTH_MEAN_RADIUS_KM
    )
    assert great_circle_km(Coordinate.from_degrees(90, 0), Coordinate.from_degrees(-90, 0)) == pytest.approx(
        math.pi * EARTH_MEAN_RADIUS_KM
    )


def test_distance_is_bounded():
    d = great_circle_km(Coordinate.from_degrees(10, -170), Coordinate.from_degrees(-10, 10))
    assert 0 <= d <= math.pi * EARTH_MEAN_RADIUS_KM


@pytest.mark.parametrize("lat,lon", [(90, 0), (-90, 0), (0, 180), (0, -180), (90, 180), (-90, -180)])
def test_boundary_values_are_accepted(lat, lon):
    c = Coordinate.from_degrees(lat, lon)
    assert c.latitude == pytest.approx(math.radians(lat))
    assert c.longitude == pytest.approx(math.radians(lon))


@pytest.mark.parametrize(
    "lat,lon",
    [
        (math.nextafter(90.0, math.inf), 0.0),
        (math.nextafter(-90.0, -math.inf), 0.0),
        (0.0, math.nextafter(180.0, math.inf)),
        (0.0, math.nextafter(-180.0, -math.inf)),
        (math.nan, 0.0),
    ],
)
def test_values_beyond_range_are_rejected(lat, lon):
    with pytest.raises(OutOfRangeError):
        Coordinate.from_degrees(lat, lon)


def test_out_of_range_is_an_invalid_argument():
    with pytest.raises(InvalidArgumentError, match="latitude"):
        Coordinate.from_degrees(91, 0)


def test_trig_values_are_precomputed_and_frozen():
    c = Coordinate.from_degrees(30, 45)
    assert c.sin_lat == pytest.approx(0.5)
    assert c.cos_lat == pytest.approx(math.sqrt(3) / 2)
    assert c.latitude_deg == pytest.approx(30)
    assert c.longitude_deg == pytest.approx(45)
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.latitude = 0.0  # type: ignore[misc]


def test_coordinates_compare_by_value():
    assert Coordinate.from_degrees(1, 2) == Coordinate.from_degrees(1, 2)
    assert hash(Coordinate.from_degrees(1, 2)) == hash(Coordinate.from_degrees(1, 2))


@pytest.mark.parametrize(
    "lat,lon",
    [
        (5.0, 0.0),
        (-1.6, 0.0),
        (0.0, 3.5),
        (0.0, -180.0),
        (math.nan, 0.0),
        (0.0, math.inf),
    ],
)
def test_direct_construction_checks_radian_range(lat, lon):
    with pytest.raises(OutOfRangeError):
        Coordinate(latitude=lat, longitude=lon)


def test_direct_construction_accepts_radian_bounds():
    c = Coordinate(latitude=-math.radians(90.0), longitude=math.radians(180.0))
    assert c.latitude_deg == pytest.approx(-90)
    assert Coordinate.from_degrees(90, -180) == Coordinate(math.radians(90.0), math.radians(-180.0))


@pytest.mark.parametrize("value", [None, "north", True])
def test_non_numeric_components_are_invalid_arguments(value):
    with pytest.raises(InvalidArgumentError, match="must be a number"):
        Coordinate(latitude=value, longitude=0.0)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="must be a number"):
        Coordinate.from_degrees(0.0, value)  # type: ignore[arg-type]
