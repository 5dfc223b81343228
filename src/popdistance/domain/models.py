"""
Wire models (Pydantic).

These types are the contract between the I/O adapters (HTTP, CLI, files) and the
engine. They check shape, types and finiteness (`Infinity` and `NaN` are rejected).
Range checks (negative weights, latitude bounds) happen when the records are turned
into engine entities.

Both snake_case (`city_population`) and PascalCase (`CityPopulation`) keys are accepted.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_pascal


def _as_text(value: Any) -> Any:
    # Years frequently arrive as JSON numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


Text = Annotated[str, BeforeValidator(_as_text)]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, extra="ignore", allow_inf_nan=False
    )


class CityRecord(_WireModel):
    """One flat input row: a city with its country, period and populations."""

    year: Text
    country: Text
    population: float
    city: Text
    city_population: float
    city_latitude: float
    city_longitude: float


class CityIn(_WireModel):
    name: Text
    population: float
    latitude: float
    longitude: float


class CountryIn(_WireModel):
    """A nested country object carrying its own city list."""

    name: Text
    year: Text
    population: float
    cities: list[CityIn] = Field(default_factory=list)


def _item_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "country" if ("cities" in value or "Cities" in value) else "record"
    return "country" if isinstance(value, CountryIn) else "record"


# Items carrying a city list are nested countries; everything else is a flat row.
InputItem = Annotated[
    Union[Annotated[CountryIn, Tag("country")], Annotated[CityRecord, Tag("record")]],
    Discriminator(_item_kind),
]


class PairResultOut(BaseModel):
    """Public shape of one engine result."""

    period: str
    name_a: str
    name_b: str
    distance_km: float
