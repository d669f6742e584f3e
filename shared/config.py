"""
Shared configuration management for the Distribution Territory Checker.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="DIST_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value


class DistributionConfig(BaseConfig):
    """Settings for catalog loading, hierarchy evaluation and reporting."""

    # Catalog
    catalog_path: str = Field(default="cities.csv")
    catalog_header_token: str = Field(default="City Code")

    # Evaluation
    max_hierarchy_depth: int = Field(default=64, ge=1)
    continue_on_error: bool = Field(default=False)

    # Reporting
    report_format: str = Field(default="text")

    # Operator prompt
    prompt_distributors: int = Field(default=2, ge=1)


def get_config(**overrides: Any) -> DistributionConfig:
    """Get configuration, with explicit overrides taking precedence over the environment."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return DistributionConfig(**values)
