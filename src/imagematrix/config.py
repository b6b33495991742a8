"""
Configuration management using Pydantic for the imagematrix engine.
Provides type-safe configuration with validation and environment variable support.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imagematrix.common.constants import (
    ConvolutionConstants,
    EdgeConstants,
    PipelineConstants,
    PointConstants,
    SegmentationConstants,
    SystemConstants,
)
from imagematrix.common.enums import ColorScheme, HysteresisMode, MergeMode, SamplingMethod

logger = logging.getLogger(__name__)


class EngineConfig(BaseSettings):
    """Algorithm mode configuration."""

    model_config = SettingsConfigDict(env_prefix="IMX_ENGINE_", extra="ignore")

    hysteresis_mode: HysteresisMode = Field(
        default=HysteresisMode.SINGLE_PASS, description="Canny weak-edge linking strategy"
    )
    merge_mode: MergeMode = Field(
        default=MergeMode.SINGLE_PASS, description="Segmentation small-region merge strategy"
    )
    rotation_sampling: SamplingMethod = Field(
        default=SamplingMethod.NEAREST, description="Rotation resampling method"
    )
    max_pipeline_steps: int = Field(
        default=PipelineConstants.MAX_STEPS_DEFAULT,
        ge=1,
        le=PipelineConstants.MAX_STEPS_LIMIT,
        description="Maximum number of steps a pipeline may hold",
    )


class DefaultsConfig(BaseSettings):
    """Default operator parameters offered to hosts."""

    model_config = SettingsConfigDict(env_prefix="IMX_DEFAULTS_", extra="ignore")

    threshold: int = Field(
        default=PointConstants.THRESHOLD_DEFAULT,
        ge=PointConstants.THRESHOLD_MIN,
        le=PointConstants.THRESHOLD_MAX,
    )
    brightness: int = Field(
        default=PointConstants.LEVEL_IDENTITY,
        ge=PointConstants.LEVEL_MIN,
        le=PointConstants.LEVEL_MAX,
    )
    contrast: int = Field(
        default=PointConstants.LEVEL_IDENTITY,
        ge=PointConstants.LEVEL_MIN,
        le=PointConstants.LEVEL_MAX,
    )
    sharpen: float = Field(
        default=ConvolutionConstants.SHARPEN_DEFAULT,
        ge=ConvolutionConstants.SHARPEN_MIN,
        le=ConvolutionConstants.SHARPEN_MAX,
    )
    color_key_tolerance: float = Field(
        default=PointConstants.COLOR_KEY_TOLERANCE_DEFAULT,
        ge=PointConstants.COLOR_KEY_TOLERANCE_MIN,
        le=PointConstants.COLOR_KEY_TOLERANCE_MAX,
    )
    canny_low: int = Field(
        default=EdgeConstants.CANNY_LOW_DEFAULT,
        ge=EdgeConstants.THRESHOLD_MIN,
        le=EdgeConstants.THRESHOLD_MAX,
    )
    canny_high: int = Field(
        default=EdgeConstants.CANNY_HIGH_DEFAULT,
        ge=EdgeConstants.THRESHOLD_MIN,
        le=EdgeConstants.THRESHOLD_MAX,
    )
    segment_tolerance: float = Field(
        default=SegmentationConstants.TOLERANCE_DEFAULT,
        ge=SegmentationConstants.TOLERANCE_MIN,
        le=SegmentationConstants.TOLERANCE_MAX,
    )
    segment_min_size: int = Field(
        default=SegmentationConstants.MIN_SIZE_DEFAULT,
        ge=SegmentationConstants.MIN_SIZE_MIN,
        le=SegmentationConstants.MIN_SIZE_MAX,
    )
    color_scheme: ColorScheme = Field(default=ColorScheme.RAINBOW)

    @model_validator(mode="after")
    def validate_canny_order(self):
        """Ensure the Canny thresholds are ordered."""
        if self.canny_low > self.canny_high:
            raise ValueError(
                f"canny_low ({self.canny_low}) must not exceed canny_high ({self.canny_high})"
            )
        return self


class SystemConfig(BaseSettings):
    """System configuration."""

    model_config = SettingsConfigDict(env_prefix="IMX_SYSTEM_", extra="ignore")

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class Settings(BaseSettings):
    """Main engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="IMX_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Sub-configurations
    engine: EngineConfig = Field(default_factory=EngineConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    # Config file support
    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        if not isinstance(values, dict):
            return values

        config_file = values.get("config_file") or os.getenv("IMX_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")
                return values

            if file_config:
                # Env vars and explicit values take precedence
                for key, value in file_config.items():
                    if key not in values or values[key] is None:
                        values[key] = value

        return values

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        config_dict = self.to_dict()
        config_dict.pop("config_file", None)
        with open(path, "w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from settings.

    Args:
        settings: Settings to use (defaults to the cached settings)
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.system.debug else getattr(logging, settings.system.log_level)

    handlers = [logging.StreamHandler()]
    if settings.system.log_file:
        handlers.append(logging.FileHandler(settings.system.log_file))

    logging.basicConfig(
        level=level, format=SystemConstants.LOG_FORMAT, handlers=handlers, force=True
    )
    logger.debug(f"Logging configured at level {logging.getLevelName(level)}")
