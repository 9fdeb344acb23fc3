"""
Logging configuration.

The packaged `src/gpstriangulation/config/logging.yaml` is the base `dictConfig`. The
level comes from an explicit caller override (the CLI's `--verbose`), else from settings
(`app.log_level`, env `GPSTRI_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config

from gpstriangulation.config.settings import get_logging_config, get_settings

PACKAGE_LOGGER = "gpstriangulation"


def configure_logging(level: str | None = None) -> str:
    """Apply the packaged logging config; returns the effective level name."""
    resolved = (level or get_settings().app.log_level).upper()
    if not isinstance(logging.getLevelName(resolved), int):
        raise ValueError(f"Unknown log level: {resolved!r}")

    # get_logging_config() is cached; edit a copy.
    config = copy.deepcopy(get_logging_config())
    config.setdefault("root", {})["level"] = resolved
    config.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})["level"] = resolved
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict):
            handler["level"] = resolved

    logging.config.dictConfig(config)
    return resolved
