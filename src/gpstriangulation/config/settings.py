# src/gpstriangulation/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/gpstriangulation/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GPSTRI_LOG_LEVEL`, `GPSTRI_ENV`)
- an external YAML file via `GPSTRI_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from gpstriangulation.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `gpstriangulation.config`."""
    text = resources.files("gpstriangulation.config").joinpath(filename).read_text(encoding="utf-8")
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


class AppSettings(BaseModel):
    name: str = "GpsTriangulation"
    environment: Literal["development", "production"] = "production"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class GeodesicSettings(BaseModel):
    max_iterations: int = Field(200, ge=1)
    convergence_tolerance: float = Field(1e-12, gt=0)


class MatchingSettings(BaseModel):
    base_lat_column: str = "lat"
    base_lon_column: str = "lon"
    target_lat_column: str = "lat"
    target_lon_column: str = "lon"
    max_distance_ft: float = Field(15.0, gt=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    geodesic: GeodesicSettings = Field(default_factory=GeodesicSettings)  # type: ignore
    matching: MatchingSettings = Field(default_factory=MatchingSettings)  # type: ignore


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GPSTRI_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    environment = os.getenv("GPSTRI_ENV")
    if environment:
        data.setdefault("app", {})["environment"] = environment.strip().lower()

    max_distance = os.getenv("GPSTRI_MAX_DISTANCE_FT")
    if max_distance:
        data.setdefault("matching", {})["max_distance_ft"] = max_distance

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GPSTRI_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")


def get_sample_request() -> dict[str, Any]:
    """Load the packaged sample triangulation request (development diagnostics only)."""
    return _read_package_yaml("sample_request.yaml")
