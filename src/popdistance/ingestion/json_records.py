"""Parser for the structured (JSON) input format.

The payload is a JSON array whose items are either flat city rows
(`{"year", "country", "population", "city", "city_population", "city_latitude",
"city_longitude"}`) or nested country objects
(`{"name", "year", "population", "cities": [{"name", "population", "latitude", "longitude"}]}`).
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from popdistance.domain.entities import Aggregate
from popdistance.domain.errors import RecordParseError
from popdistance.domain.models import InputItem
from popdistance.ingestion.base import RecordParser
from popdistance.ingestion.builder import build_aggregates

logger = logging.getLogger(__name__)

_ITEMS_ADAPTER = TypeAdapter(list[InputItem])


def _describe(exc: ValidationError) -> RecordParseError:
    err = exc.errors()[0]
    loc = tuple(err.get("loc") or ())
    index = loc[0] if loc and isinstance(loc[0], int) else None
    # loc is (index, union tag, field, ...) for item errors.
    fields = loc[2:] if index is not None else loc
    field = ".".join(str(part) for part in fields) or "payload"
    location = f"record {index}" if index is not None else None
    return RecordParseError(f"{field}: {err.get('msg', 'invalid value')}", location=location)


class JsonRecordParser(RecordParser):
    format_name = "json"
    media_types = ("application/json",)

    def parse(self, raw: Any) -> list[Aggregate]:
        try:
            if isinstance(raw, (str, bytes, bytearray)):
                items = _ITEMS_ADAPTER.validate_json(raw)
            else:
                items = _ITEMS_ADAPTER.validate_python(raw)
        except ValidationError as e:
            raise _describe(e) from e

        logger.debug("Decoded %d JSON records", len(items))
        return build_aggregates(items, periods=self.periods)
