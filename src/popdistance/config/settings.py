# src/popdistance/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/popdistance/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `POPDISTANCE_CONFIG_PATH`
- environment variables (e.g., `POPDISTANCE_LOG_LEVEL`, `POPDISTANCE_EXECUTOR`)

Design rule:
- Tuning knobs (worker pool, CSV dialect) live in YAML, not hard-coded in the engine.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from popdistance.core.env import load_dotenv_if_present, resolve_project_path


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `popdistance.config`."""
    text = resources.files("popdistance.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


ExecutorKind = Literal["process", "thread", "serial"]


class AppSettings(BaseModel):
    name: str = "PopDistance"
    log_level: str = "INFO"


class EngineSettings(BaseModel):
    executor: ExecutorKind = "process"
    max_workers: int | None = Field(default=None, ge=1)
    # Groups smaller than this are computed inline; pool start-up dominates below it.
    parallel_min_group_size: int = Field(default=16, ge=0)


class IngestionSettings(BaseModel):
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    skip_header: bool = True


class ApiSettings(BaseModel):
    cors_origins: list[str] = Field(default_factory=list)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    data = dict(data)
    log_level = os.getenv("POPDISTANCE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    executor = os.getenv("POPDISTANCE_EXECUTOR")
    if executor:
        data.setdefault("engine", {})["executor"] = executor.strip().lower()

    max_workers = os.getenv("POPDISTANCE_MAX_WORKERS")
    if max_workers and max_workers.strip():
        data.setdefault("engine", {})["max_workers"] = int(max_workers)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("POPDISTANCE_CONFIG_PATH")
    if config_path:
        raw = _read_yaml_file(resolve_project_path(config_path))
    else:
        raw = _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
