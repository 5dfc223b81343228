import dataclasses
import math

import pytest

from popdistance.core.geo import Coordinate, great_circle_km
from popdistance.domain.entities import Aggregate, PairResult, Place, place_distance
from popdistance.domain.errors import InvalidArgumentError

NYC = Coordinate.from_degrees(40.7143528, -74.0059731)
CHI = Coordinate.from_degrees(41.8781136, -87.6297982)


def test_place_requires_name_and_non_negative_weight():
    with pytest.raises(InvalidArgumentError, match="name"):
        Place(name="", weight=1, coordinate=NYC)
    with pytest.raises(InvalidArgumentError, match="name"):
        Place(name=None, weight=1, coordinate=NYC)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="weight"):
        Place(name="NYC", weight=-1, coordinate=NYC)
    with pytest.raises(InvalidArgumentError, match="coordinate"):
        Place(name="NYC", weight=1, coordinate=None)  # type: ignore[arg-type]


def test_place_zero_weight_is_allowed():
    assert Place(name="Ghost town", weight=0, coordinate=NYC).weight == 0.0


def test_place_distance_delegates_to_great_circle():
    a = Place(name="NYC", weight=1, coordinate=NYC)
    b = Place(name="Chicago", weight=1, coordinate=CHI)
    assert place_distance(a, b) == great_circle_km(NYC, CHI)
    with pytest.raises(InvalidArgumentError):
        place_distance(a, None)  # type: ignore[arg-type]


def test_aggregate_validation():
    with pytest.raises(InvalidArgumentError, match="total_weight"):
        Aggregate(name="USA", period="2015", total_weight=-1)
    with pytest.raises(InvalidArgumentError, match="period"):
        Aggregate(name="USA", period=None, total_weight=1)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="name"):
        Aggregate(name="", period="2015", total_weight=1)
    with pytest.raises(InvalidArgumentError, match="members"):
        Aggregate(name="USA", period="2015", total_weight=1, members=None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="Place"):
        Aggregate(name="USA", period="2015", total_weight=1, members=["NYC"])  # type: ignore[list-item]


def test_aggregate_copies_members():
    members = [Place(name="NYC", weight=5, coordinate=NYC)]
    agg = Aggregate(name="USA", period="2015", total_weight=10, members=members)
    members.append(Place(name="Chicago", weight=5, coordinate=CHI))

    assert isinstance(agg.members, tuple)
    assert [p.name for p in agg.members] == ["NYC"]
    with pytest.raises(dataclasses.FrozenInstanceError):
        agg.name = "Canada"  # type: ignore[misc]


def test_aggregate_empty_members_allowed():
    agg = Aggregate(name="Atlantis", period="2015", total_weight=0)
    assert agg.members == ()
    assert str(agg) == "(Atlantis, 0.0, 0)"


def test_pair_result_public_shape():
    a = Aggregate(name="USA", period="2015", total_weight=1)
    b = Aggregate(name="Mexico", period="2015", total_weight=1)
    r = PairResult(a=a, b=b, distance=12.5)
    assert r.period == "2015"
    assert r.as_dict() == {"period": "2015", "name_a": "USA", "name_b": "Mexico", "distance_km": 12.5}


@pytest.mark.parametrize("weight", [math.inf, -math.inf, math.nan])
def test_non_finite_weights_are_rejected(weight):
    with pytest.raises(InvalidArgumentError, match="finite"):
        Place(name="NYC", weight=weight, coordinate=NYC)
    with pytest.raises(InvalidArgumentError, match="finite"):
        Aggregate(name="USA", period="2015", total_weight=weight)


@pytest.mark.parametrize("weight", [None, "lots", True, [1]])
def test_non_numeric_weights_are_invalid_arguments(weight):
    with pytest.raises(InvalidArgumentError, match="must be a number"):
        Place(name="NYC", weight=weight, coordinate=NYC)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="must be a number"):
        Aggregate(name="USA", period="2015", total_weight=weight)  # type: ignore[arg-type]


def test_numeric_strings_are_accepted_as_weights():
    assert Place(name="NYC", weight="12.5", coordinate=NYC).weight == 12.5  # type: ignore[arg-type]
