"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.availability import DEFAULT_STEP_MINUTES
from .domain.time_utils import DEFAULT_TIMEZONE


def _positive(name: str, value: int) -> int:
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero, got {value}")
    return value


class SlotsConfig(BaseModel):
    """Slot generation settings shared by every barbershop."""
    step_minutes: int = DEFAULT_STEP_MINUTES

    @field_validator("step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure slot granularity is positive."""
        return _positive("step_minutes", value)


class BarbershopOverride(BaseModel):
    """Per-barbershop settings that differ from the defaults."""
    id: str
    step_minutes: Optional[int] = None

    @field_validator("step_minutes")
    @classmethod
    def validate_step(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        return _positive("step_minutes", value)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    slots: SlotsConfig = Field(default_factory=SlotsConfig)
    barbershops: List[BarbershopOverride] = Field(default_factory=list)
    data_file: Optional[Path] = None
    api_base_url: Optional[str] = None
    request_timeout_seconds: float = 10.0

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("barbershops")
    @classmethod
    def validate_barbershops(cls, value: List[BarbershopOverride]) -> List[BarbershopOverride]:
        """Ensure each barbershop is overridden at most once."""
        seen: set[str] = set()
        for override in value:
            if override.id in seen:
                raise ValueError(f"Duplicate barbershop override detected: {override.id}")
            seen.add(override.id)
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be greater than zero")
        return value

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
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def find_override(self, barbershop_id: str) -> BarbershopOverride | None:
        for override in self.barbershops:
            if override.id == barbershop_id:
                return override
        return None

    def step_minutes_for(self, barbershop_id: str) -> int:
        """Slot granularity for a barbershop, falling back to the global setting."""
        override = self.find_override(barbershop_id)
        if override and override.step_minutes is not None:
            return override.step_minutes
        return self.slots.step_minutes


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
