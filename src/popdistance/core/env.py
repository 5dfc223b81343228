"""
Local environment: the project root and an optional `.env` file.

Dataset paths given to the CLI are relative to the project root, not the process
working directory, so `popdistance compute data/cities.csv` behaves the same from
any subdirectory.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _env_file() -> Path | None:
    explicit = os.getenv("POPDISTANCE_ENV_FILE")
    return Path(explicit).expanduser().resolve() if explicit else None


@lru_cache
def get_project_root() -> Path:
    """`POPDISTANCE_PROJECT_ROOT`, else the env file's folder, else the nearest `pyproject.toml` above cwd."""
    override = os.getenv("POPDISTANCE_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    env_file = _env_file()
    if env_file is not None:
        return env_file.parent

    cwd = Path.cwd().resolve()
    return next((p for p in (cwd, *cwd.parents) if (p / "pyproject.toml").is_file()), cwd)


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the env file once, without overriding variables that are already set."""
    env_path = _env_file() or get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()
