"""
Logging configuration.

We use a YAML logging config (`src/popdistance/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `POPDISTANCE_LOG_LEVEL`).
"""

from __future__ import annotations

import logging.config

from popdistance.config.settings import get_logging_config, get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    config = get_logging_config()
    level = (level or get_settings().app.log_level).upper()

    config = {**config, "root": {**config.get("root", {}), "level": level}}
    handlers = {}
    for name, handler in config.get("handlers", {}).items():
        if isinstance(handler, dict) and "level" in handler:
            handler = {**handler, "level": level}
        handlers[name] = handler
    config["handlers"] = handlers

    logging.config.dictConfig(config)
