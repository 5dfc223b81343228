"""Abstract record parser: raw adapter payload -> list of Aggregate."""

from __future__ import annotations

import abc
from typing import Any, Iterable

from popdistance.domain.entities import Aggregate


class RecordParser(abc.ABC):
    """Convert one external encoding into engine entities.

    Implementations must reject malformed input with `RecordParseError` before
    any Aggregate is returned.
    """

    #: Short format name used by the CLI and file loader.
    format_name: str = ""
    #: Media types this parser accepts over HTTP.
    media_types: tuple[str, ...] = ()

    def __init__(self, *, periods: Iterable[str] | None = None):
        self.periods = list(periods) if periods else None

    @abc.abstractmethod
    def parse(self, raw: Any) -> list[Aggregate]:
        """Parse a raw payload into Aggregates.

        Args:
            raw: The payload (text, bytes, or already-decoded data, depending on the parser).

        Returns:
            Aggregates in first-appearance order.
        """
