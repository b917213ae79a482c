"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from body_metrics_ledger.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """Persistent storage configuration."""

    path: str = "data/metrics.json"
    indent: int | None = Field(2, ge=0)


class CaptureConfig(BaseModel):
    """Capture timestamp configuration for new entries."""

    timezone: str = "UTC"
    date_format: str = "%b %d, %Y"
    time_format: str = "%I:%M %p"
    last_updated_format: str = "{date} {time}"

    @field_validator("last_updated_format")
    @classmethod
    def _check_last_updated_format(cls, value: str) -> str:
        try:
            value.format(date="Jan 15, 2024", time="10:30 AM")
        except (AttributeError, IndexError, KeyError, ValueError) as e:
            raise ValueError(
                f"last_updated_format may only use {{date}} and {{time}} placeholders: {value!r}"
            ) from e
        return value


class DisplayConfig(BaseModel):
    """Display formatting configuration."""

    decimals: int = Field(1, ge=0)
    recent_limit: int = Field(10, gt=0)
    placeholder: str = "--"


class OutputFilesConfig(BaseModel):
    """Output file names configuration."""

    history_csv: str = "{metric}_history.csv"
    summary_json: str = "metrics_summary.json"


class OutputConfig(BaseModel):
    """Output configuration."""

    dir: str = "output"
    files: OutputFilesConfig = Field(default_factory=OutputFilesConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="BML_", env_nested_delimiter="__", case_sensitive=False
    )


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            if not isinstance(config_dict, dict):
                raise ConfigurationError(
                    f"Configuration root must be a mapping: {self.config_path}"
                )

            self.config = AppConfig(**config_dict)

        except ConfigurationError:
            raise
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get persistent storage configuration."""
        return self.config.storage

    def get_capture_config(self) -> CaptureConfig:
        """Get entry capture configuration."""
        return self.config.capture

    def get_display_config(self) -> DisplayConfig:
        """Get display formatting configuration."""
        return self.config.display

    def get_output_config(self) -> OutputConfig:
        """Get output configuration."""
        return self.config.output

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging
