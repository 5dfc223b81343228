"""
Dataset loading.

Reads a country/city dataset from disk and hands it to the matching parser:
`.csv`/`.txt` files go to the delimited parser, `.json` files to the structured one.
Relative paths are tried against the working directory first, then the project root.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Literal

from popdistance.config.settings import Settings, get_settings
from popdistance.core.env import resolve_project_path
from popdistance.domain.entities import Aggregate
from popdistance.domain.errors import InvalidArgumentError
from popdistance.ingestion.base import RecordParser
from popdistance.ingestion.delimited import DelimitedTextParser
from popdistance.ingestion.json_records import JsonRecordParser

logger = logging.getLogger(__name__)

FormatName = Literal["csv", "json"]

_SUFFIX_FORMATS: dict[str, FormatName] = {".csv": "csv", ".txt": "csv", ".json": "json"}


def build_parser(
    fmt: FormatName,
    *,
    settings: Settings | None = None,
    periods: Iterable[str] | None = None,
) -> RecordParser:
    """Return the parser for `fmt`, configured from settings."""
    settings = settings or get_settings()
    if fmt == "csv":
        return DelimitedTextParser(
            delimiter=settings.ingestion.delimiter,
            skip_header=settings.ingestion.skip_header,
            periods=periods,
        )
    if fmt == "json":
        return JsonRecordParser(periods=periods)
    raise InvalidArgumentError(f"Unknown input format '{fmt}'; expected csv or json.")


def detect_format(path: Path) -> FormatName:
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise InvalidArgumentError(f"Cannot infer input format from '{path.name}'; pass --format csv|json.")
    return fmt


def _resolve(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute() or p.exists():
        return p
    return resolve_project_path(p)


def load_dataset(
    path: str | Path,
    *,
    fmt: FormatName | None = None,
    periods: Iterable[str] | None = None,
    settings: Settings | None = None,
) -> list[Aggregate]:
    """Load and validate a dataset file into Aggregates."""
    resolved = _resolve(path)
    fmt = fmt or detect_format(resolved)
    parser = build_parser(fmt, settings=settings, periods=periods)
    text = resolved.read_text(encoding="utf-8-sig")
    aggregates = parser.parse(text)
    logger.info("Loaded %d aggregates from %s (%s)", len(aggregates), resolved, fmt)
    return aggregates
