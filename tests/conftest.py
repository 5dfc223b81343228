"""Pytest configuration and shared fixtures."""

import pytest

from popdistance.config.settings import EngineSettings, get_logging_config, get_settings
from popdistance.core.env import get_project_root, load_dotenv_if_present
from popdistance.core.geo import Coordinate
from popdistance.domain.entities import Aggregate, Place


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # Settings are lru_cached; keep env-driven overrides from leaking between tests.
    for name in [
        "POPDISTANCE_CONFIG_PATH",
        "POPDISTANCE_LOG_LEVEL",
        "POPDISTANCE_EXECUTOR",
        "POPDISTANCE_MAX_WORKERS",
        "POPDISTANCE_ENV_FILE",
        "POPDISTANCE_PROJECT_ROOT",
    ]:
        monkeypatch.delenv(name, raising=False)
    for fn in (get_settings, get_logging_config, get_project_root, load_dotenv_if_present):
        fn.cache_clear()
    yield
    for fn in (get_settings, get_logging_config, get_project_root, load_dotenv_if_present):
        fn.cache_clear()


@pytest.fixture
def serial_engine() -> EngineSettings:
    return EngineSettings(executor="serial")


@pytest.fixture
def thread_engine() -> EngineSettings:
    return EngineSettings(executor="thread", max_workers=4, parallel_min_group_size=0)


@pytest.fixture
def make_aggregate():
    """Factory: `make_aggregate(name, period, total, [(city, weight, lat_deg, lon_deg), ...])`."""

    def _make(name: str, period: str, total: float, cities: list[tuple[str, float, float, float]]) -> Aggregate:
        return Aggregate(
            name=name,
            period=period,
            total_weight=total,
            members=[Place(name=c, weight=w, coordinate=Coordinate.from_degrees(lat, lon)) for c, w, lat, lon in cities],
        )

    return _make


@pytest.fixture
def north_america(make_aggregate) -> list[Aggregate]:
    return [
        make_aggregate("USA", "2015", 100, [("New York", 60, 40.7143528, -74.0059731), ("Chicago", 40, 41.8781136, -87.6297982)]),
        make_aggregate("Mexico", "2015", 100, [("Mexico City", 70, 19.43, -99.13), ("Guadalajara", 30, 20.66, -103.35)]),
        make_aggregate("Canada", "2015", 50, [("Toronto", 30, 43.65, -79.38), ("Montreal", 20, 45.50, -73.57)]),
    ]
