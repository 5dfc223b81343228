"""
Core entities for the population-weighted distance engine.

These are plain frozen dataclasses rather than Pydantic models: the engine touches
every Place of every Aggregate once per pair, so validation runs once in
`__post_init__` and attribute access stays cheap afterwards.

- `Place`: a weighted point (a city with its population).
- `Aggregate`: a named, period-keyed collection of places (a country in a given year).
- `PairResult`: one engine output row.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from popdistance.core.geo import Coordinate, great_circle_km
from popdistance.domain.errors import InvalidArgumentError, as_number


@dataclass(frozen=True)
class Place:
    """A named point carrying a non-negative weight (population)."""

    name: str
    weight: float
    coordinate: Coordinate

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError(f"place name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.coordinate, Coordinate):
            raise InvalidArgumentError(f"place {self.name!r} has no coordinate")
        weight = as_number(self.weight, f"place {self.name!r} weight")
        if not (math.isfinite(weight) and weight >= 0):
            raise InvalidArgumentError(
                f"place {self.name!r} weight must be finite and >= 0, got {self.weight!r}"
            )
        object.__setattr__(self, "weight", weight)

    def __str__(self) -> str:
        return f"({self.name}, {self.weight})"


def place_distance(a: Place, b: Place) -> float:
    """Great-circle distance in kilometers between two places."""
    if a is None or b is None:
        raise InvalidArgumentError("place_distance requires two places")
    return great_circle_km(a.coordinate, b.coordinate)


@dataclass(frozen=True)
class Aggregate:
    """A period-keyed collection of places with an independently supplied total weight.

    `total_weight` is the normalization denominator; it usually equals the sum of the
    member weights but is not required to. `members` is copied into a tuple, so later
    changes to the caller's list never reach the aggregate.
    """

    name: str
    period: str
    total_weight: float
    members: tuple[Place, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError(f"aggregate name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.period, str) or not self.period:
            raise InvalidArgumentError(
                f"aggregate {self.name!r} period must be a non-empty string, got {self.period!r}"
            )
        if self.members is None:
            raise InvalidArgumentError(f"aggregate {self.name!r} members must not be None")
        weight = as_number(self.total_weight, f"aggregate {self.name!r} total_weight")
        if not (math.isfinite(weight) and weight >= 0):
            raise InvalidArgumentError(
                f"aggregate {self.name!r} total_weight must be finite and >= 0, got {self.total_weight!r}"
            )
        members = tuple(self.members)
        for m in members:
            if not isinstance(m, Place):
                raise InvalidArgumentError(
                    f"aggregate {self.name!r} members must be Place objects, got {type(m).__name__}"
                )
        object.__setattr__(self, "total_weight", weight)
        object.__setattr__(self, "members", members)

    def __str__(self) -> str:
        return f"({self.name}, {self.total_weight}, {len(self.members)})"


@dataclass(frozen=True)
class PairResult:
    """Population-weighted distance between two aggregates of the same period."""

    a: Aggregate
    b: Aggregate
    distance: float

    @property
    def period(self) -> str:
        return self.a.period

    def as_dict(self) -> dict[str, str | float]:
        return {
            "period": self.a.period,
            "name_a": self.a.name,
            "name_b": self.b.name,
            "distance_km": float(self.distance),
        }
