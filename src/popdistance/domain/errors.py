"""
Error taxonomy shared by the engine and its adapters.

- `InvalidArgumentError`: bad construction inputs (raised immediately, nothing half-built escapes).
- `OutOfRangeError`: latitude/longitude outside the valid degree range.
- `RecordParseError`: adapter input that cannot be turned into records (CSV/JSON).
- `DomainError`: an aggregate with zero total weight took part in a pair computation.

The validation errors subclass `ValueError` so callers that already treat `ValueError`
as "bad input" (API -> 400, CLI -> exit 2) keep working.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when an entity is constructed from malformed inputs."""


class OutOfRangeError(InvalidArgumentError):
    """Raised when a coordinate lies outside [-90, 90] x [-180, 180] degrees."""


class RecordParseError(InvalidArgumentError):
    """Raised when an input record cannot be parsed."""

    def __init__(self, message: str, *, location: str | None = None):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class DomainError(ArithmeticError):
    """Raised when a population-weighted distance is undefined (zero total weight)."""


def as_number(value: object, what: str) -> float:
    """Convert `value` to float, reporting non-numeric input as `InvalidArgumentError`."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{what} must be a number, got {value!r}")
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{what} must be a number, got {value!r}") from None
