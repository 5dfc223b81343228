"""Population-weighted great-circle distances between period-keyed aggregates."""

__version__ = "0.1.0"
