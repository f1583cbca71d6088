"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.validation import Bounds, ToolLimits


def _check_bounds(value: int, bounds: Bounds, name: str) -> int:
    if not bounds.minimum <= value <= bounds.maximum:
        raise ValueError(
            f"{name} must be between {bounds.minimum} and {bounds.maximum}, got {value}"
        )
    return value


class DefaultsConfig(BaseModel):
    """Default values applied when a tool call omits an argument."""
    slot_step_minutes: int = 30
    duration_minutes: int = ToolLimits.DURATION.fallback
    slot_limit: int = ToolLimits.SLOT_LIMIT.fallback
    min_gap_minutes: int = ToolLimits.MIN_GAP.fallback
    gap_limit: int = ToolLimits.GAP_LIMIT.fallback

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the scan step is positive and divides an hour."""
        if value <= 0 or 60 % value != 0:
            raise ValueError("slot_step_minutes must be a positive divisor of 60")
        return value

    @model_validator(mode="after")
    def validate_tool_bounds(self) -> "DefaultsConfig":
        """Keep defaults inside the bounds the tools clamp to."""
        _check_bounds(self.duration_minutes, ToolLimits.DURATION, "duration_minutes")
        _check_bounds(self.slot_limit, ToolLimits.SLOT_LIMIT, "slot_limit")
        _check_bounds(self.min_gap_minutes, ToolLimits.MIN_GAP, "min_gap_minutes")
        _check_bounds(self.gap_limit, ToolLimits.GAP_LIMIT, "gap_limit")
        return self


class ApiConfig(BaseModel):
    """Connection settings for the booking app's REST API."""
    base_url: str
    token: str = ""
    timeout_seconds: float = 15.0

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")


class AppConfig(BaseModel):
    """Application configuration."""
    business_id: str = ""
    timezone: str = "Europe/Kyiv"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    data_file: Optional[Path] = None
    api: Optional[ApiConfig] = None
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative data files are resolved against the config file location.
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
