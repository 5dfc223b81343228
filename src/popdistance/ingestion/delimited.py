"""Parser for the delimited-text (CSV) input format.

Column order (first line is a header and is skipped):

    year, country, population, city, city_population, city_latitude, city_longitude

Fields are trimmed before numeric parsing. Quoted fields may contain the delimiter.
"""

from __future__ import annotations

import csv
import logging
import math
from typing import Iterable

from popdistance.domain.entities import Aggregate
from popdistance.domain.errors import RecordParseError
from popdistance.domain.models import CityRecord
from popdistance.ingestion.base import RecordParser
from popdistance.ingestion.builder import AggregateBuilder

logger = logging.getLogger(__name__)

COLUMNS = (
    "year",
    "country",
    "population",
    "city",
    "city_population",
    "city_latitude",
    "city_longitude",
)
_NUMERIC = {"population", "city_population", "city_latitude", "city_longitude"}


def _parse_number(column: str, value: str, *, location: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise RecordParseError(f"{column} is not a number: {value!r}", location=location) from None
    if not math.isfinite(number):
        raise RecordParseError(f"{column} must be finite, got {value!r}", location=location)
    return number


def parse_row(fields: list[str], *, location: str) -> CityRecord:
    """Turn one split line into a `CityRecord` (extra trailing columns are ignored)."""
    cells = [f.strip() for f in fields]
    if len(cells) < len(COLUMNS):
        raise RecordParseError(
            f"expected {len(COLUMNS)} columns, got {len(cells)}",
            location=location,
        )
    values: dict[str, str | float] = {}
    for column, cell in zip(COLUMNS, cells):
        values[column] = _parse_number(column, cell, location=location) if column in _NUMERIC else cell
    return CityRecord.model_validate(values)


class DelimitedTextParser(RecordParser):
    format_name = "csv"
    media_types = ("text/csv", "text/plain")

    def __init__(
        self,
        *,
        delimiter: str = ",",
        skip_header: bool = True,
        periods: Iterable[str] | None = None,
    ):
        super().__init__(periods=periods)
        self.delimiter = delimiter
        self.skip_header = skip_header

    def _numbered_lines(self, text: str) -> list[tuple[int, str]]:
        lines = [(n, line) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
        return lines[1:] if self.skip_header else lines

    def parse(self, raw: str | bytes) -> list[Aggregate]:
        text = raw.decode("utf-8-sig") if isinstance(raw, (bytes, bytearray)) else raw.lstrip("\ufeff")
        numbered = self._numbered_lines(text)

        builder = AggregateBuilder(periods=self.periods)
        reader = csv.reader((line for _, line in numbered), delimiter=self.delimiter, skipinitialspace=True)
        for (lineno, _), fields in zip(numbered, reader):
            location = f"line {lineno}"
            builder.add_record(parse_row(fields, location=location), location=location)

        logger.debug("Parsed %d delimited rows", len(numbered))
        return builder.build()
