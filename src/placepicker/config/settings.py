# src/placepicker/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/placepicker/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `PLACEPICKER_LOG_LEVEL`, `PLACEPICKER_STORAGE_DIR`)
- an external YAML file via `PLACEPICKER_CONFIG_PATH`

Design rule:
- Paths, storage keys and UI strings live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from placepicker.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field, model_validator


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `placepicker.config`."""
    text = resources.files("placepicker.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "PlacePicker"
    http_timeout_seconds: float = 5
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/places.json"


class SelectionSettings(BaseModel):
    storage_dir: str = ".data/placepicker"
    storage_key: str = Field("selectedPlaces", min_length=1)


class PositionSettings(BaseModel):
    mode: Literal["fixed", "ip", "client"] = "client"
    fixed_lat: float | None = Field(default=None, ge=-90, le=90)
    fixed_lon: float | None = Field(default=None, ge=-180, le=180)
    ip_url: str = "https://ipapi.co/json/"

    @model_validator(mode="after")
    def _validate_fixed(self) -> "PositionSettings":
        if self.mode == "fixed" and (self.fixed_lat is None or self.fixed_lon is None):
            raise ValueError("position.mode 'fixed' requires position.fixed_lat and position.fixed_lon")
        return self


class UiSettings(BaseModel):
    picked_title: str = "I'd like to visit ..."
    picked_fallback_text: str = "Select the places you would like to visit below."
    available_title: str = "Available Places"
    available_fallback_text: str = "Sorting places by distance..."


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    position: PositionSettings = Field(default_factory=PositionSettings)
    ui: UiSettings = Field(default_factory=UiSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)
    storage_dir = os.getenv("PLACEPICKER_STORAGE_DIR")
    if storage_dir:
        data.setdefault("selection", {})["storage_dir"] = storage_dir

    catalog_path = os.getenv("PLACEPICKER_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    log_level = os.getenv("PLACEPICKER_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    position_mode = os.getenv("PLACEPICKER_POSITION_MODE")
    if position_mode:
        data.setdefault("position", {})["mode"] = position_mode

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("PLACEPICKER_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
