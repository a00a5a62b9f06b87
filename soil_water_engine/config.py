"""Configuration management for soil-water-engine.

Settings come from ``config/defaults.yaml`` when present, with environment
overrides (a ``.env`` file is loaded first). The engine itself takes all
parameters explicitly; settings only feed the command-line interface.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import ResultTier

logger = get_logger(__name__)

TIER_ENV_VAR = "SOIL_WATER_TIER"
PRECISION_ENV_VAR = "SOIL_WATER_PRECISION"
CONFIG_DIR_ENV_VAR = "SOIL_WATER_CONFIG_DIR"


class AnalysisDefaults(BaseModel):
    """Default values for optional analysis parameters."""

    organic_matter: float = Field(2.5, ge=0.0, le=8.0)
    bulk_density_factor: float = Field(1.0, ge=0.9, le=1.8)
    gravel_content: float = Field(0.0, ge=0.0, le=80.0)
    electrical_conductivity: float = Field(0.0, ge=0.0, le=20.0)


class OutputSettings(BaseModel):
    """How results are presented."""

    tier: ResultTier = ResultTier.ENTERPRISE
    precision: int = Field(2, ge=0, le=6)


class AppSettings(BaseModel):
    """Main application settings."""

    defaults: AnalysisDefaults = AnalysisDefaults()
    output: OutputSettings = OutputSettings()


@lru_cache(maxsize=1)
def get_config_dir() -> Path:
    """Get the configuration directory path."""
    override = os.getenv(CONFIG_DIR_ENV_VAR)
    if override:
        config_dir = Path(override)
    else:
        # Find config directory relative to this module
        config_dir = Path(__file__).resolve().parent.parent / "config"

    if not config_dir.exists():
        raise FileNotFoundError(f"Configuration directory not found: {config_dir}")

    return config_dir


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file."""
    config_file = get_config_dir() / filename

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        logger.debug(f"Loaded configuration from {config_file}")
        return data or {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e


def _env_overrides() -> dict[str, Any]:
    output: dict[str, Any] = {}

    tier = os.getenv(TIER_ENV_VAR)
    if tier:
        output["tier"] = tier.lower()

    precision = os.getenv(PRECISION_ENV_VAR)
    if precision:
        try:
            output["precision"] = int(precision)
        except ValueError as e:
            raise ValueError(
                f"{PRECISION_ENV_VAR} must be an integer, got {precision!r}"
            ) from e

    return output


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get application settings with environment override support.

    Uses lazy loading so importing the package never touches the disk.
    """
    from dotenv import load_dotenv

    load_dotenv(override=False)

    try:
        data = load_yaml_config("defaults.yaml")
    except FileNotFoundError as e:
        logger.debug(f"Using built-in settings: {e}")
        data = {}

    output = {**data.get("output", {}), **_env_overrides()}
    settings = AppSettings(defaults=data.get("defaults", {}), output=output)

    logger.debug(
        f"Settings: tier={settings.output.tier.value}, "
        f"precision={settings.output.precision}"
    )
    return settings


def clear_settings_cache() -> None:
    """Clear cached configuration to force reload from the current environment.

    This is useful in tests when environment variables are modified.
    """
    get_config_dir.cache_clear()
    get_settings.cache_clear()
