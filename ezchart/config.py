"""Configuration models using Pydantic for validation."""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import os

from ezchart.aggregates import DEFAULT_THRESHOLD_BANDS, MAX_DECIMAL_PLACES
from ezchart.errors import ConfigError


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"


class SummarySettings(BaseModel):
    """Tuning for summary computation."""
    threshold_bands: List[float] = Field(default_factory=lambda: list(DEFAULT_THRESHOLD_BANDS))
    decimal_place_cap: int = Field(default=MAX_DECIMAL_PLACES, ge=0, le=MAX_DECIMAL_PLACES)

    @field_validator('threshold_bands')
    @classmethod
    def validate_bands(cls, v):
        """Bands must be fractions in [0, 1] in non-decreasing order."""
        if not v:
            raise ValueError("At least one threshold band must be defined")

        if any(b < 0.0 or b > 1.0 for b in v):
            raise ValueError("Threshold bands must lie within [0, 1]")

        if any(a > b for a, b in zip(v, v[1:])):
            raise ValueError("Threshold bands must be non-decreasing")

        return v


class PaletteSettings(BaseModel):
    """Tuning for generated palettes."""
    luminosity_step: float = Field(default=0.1, gt=0.0)


class Config(BaseModel):
    """Root configuration model."""
    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    summary: SummarySettings = Field(default_factory=SummarySettings)
    palette: PaletteSettings = Field(default_factory=PaletteSettings)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate configuration from a YAML file.

    Without a path the defaults are used; ``LOG_LEVEL`` still applies.
    """
    import yaml

    raw_config = {}
    if config_path is not None:
        if not os.path.exists(config_path):
            raise ConfigError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if not isinstance(raw_config, dict):
            raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    # Apply environment variable overrides
    if env_log_level := os.getenv('LOG_LEVEL'):
        if not isinstance(raw_config.get('global'), dict):
            raw_config['global'] = {}
        raw_config['global']['log_level'] = env_log_level

    try:
        return Config(**raw_config)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
