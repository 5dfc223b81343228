"""
Entity construction: input records -> Aggregates.

Flat rows are grouped by `(period, country name, country population)`; every row sharing
that key becomes one member Place of the same Aggregate. Nested country objects already
carry their cities and map straight onto one Aggregate each. Output order follows the
first appearance of each aggregate in the input.

Entity validation errors are re-raised as `RecordParseError` naming the offending record,
so no Aggregate reaches the engine unless every record was valid.
"""

from __future__ import annotations

import logging
from typing import Iterable

from popdistance.core.geo import Coordinate
from popdistance.domain.entities import Aggregate, Place
from popdistance.domain.errors import InvalidArgumentError, RecordParseError
from popdistance.domain.models import CityRecord, CountryIn

logger = logging.getLogger(__name__)

GroupKey = tuple[str, str, float]


def _place(name: str, population: float, latitude: float, longitude: float, *, location: str) -> Place:
    try:
        return Place(name=name, weight=population, coordinate=Coordinate.from_degrees(latitude, longitude))
    except InvalidArgumentError as e:
        raise RecordParseError(str(e), location=location) from e


class AggregateBuilder:
    """Accumulate records and country objects, then build immutable Aggregates."""

    def __init__(self, *, periods: Iterable[str] | None = None):
        self._periods = {str(p) for p in periods} if periods else None
        self._pending: dict[GroupKey, list[Place]] = {}
        self._slots: list[GroupKey | Aggregate] = []
        self.records_seen = 0

    def _wanted(self, period: str) -> bool:
        return self._periods is None or period in self._periods

    def add_record(self, record: CityRecord, *, location: str) -> None:
        self.records_seen += 1
        if not self._wanted(record.year):
            return
        place = _place(
            record.city,
            record.city_population,
            record.city_latitude,
            record.city_longitude,
            location=location,
        )
        key: GroupKey = (record.year, record.country, float(record.population))
        if key not in self._pending:
            self._pending[key] = []
            self._slots.append(key)
        self._pending[key].append(place)

    def add_country(self, country: CountryIn, *, location: str) -> None:
        self.records_seen += 1
        if not self._wanted(country.year):
            return
        members = [
            _place(c.name, c.population, c.latitude, c.longitude, location=f"{location}, city {j}")
            for j, c in enumerate(country.cities)
        ]
        try:
            self._slots.append(
                Aggregate(name=country.name, period=country.year, total_weight=country.population, members=members)
            )
        except InvalidArgumentError as e:
            raise RecordParseError(str(e), location=location) from e

    def build(self) -> list[Aggregate]:
        out: list[Aggregate] = []
        for slot in self._slots:
            if isinstance(slot, Aggregate):
                out.append(slot)
                continue
            period, name, population = slot
            try:
                out.append(Aggregate(name=name, period=period, total_weight=population, members=self._pending[slot]))
            except InvalidArgumentError as e:
                raise RecordParseError(str(e), location=f"country {name!r} ({period})") from e
        logger.info("Built %d aggregates from %d input records", len(out), self.records_seen)
        return out


def build_aggregates(
    items: Iterable[CityRecord | CountryIn],
    *,
    periods: Iterable[str] | None = None,
) -> list[Aggregate]:
    """Build Aggregates from flat records and/or nested country objects.

    Args:
        items: `CityRecord` rows and/or `CountryIn` objects.
        periods: optional whitelist of periods; records for other periods are dropped.
    """
    builder = AggregateBuilder(periods=periods)
    for i, item in enumerate(items):
        location = f"record {i}"
        if isinstance(item, CountryIn):
            builder.add_country(item, location=location)
        elif isinstance(item, CityRecord):
            builder.add_record(item, location=location)
        else:
            raise RecordParseError(f"unsupported item type {type(item).__name__}", location=location)
    return builder.build()
