"""Checker settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set the period explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CheckerSettings(BaseSettings):
    """Periodic consistency checker settings.

    Environment variables:
        VC_CHECKER_ENABLED: Start the checker with the host (default: true)
        VC_CHECKER_PERIOD_SECONDS: Pause between two cycles (default: 60)
        VC_CHECKER_RESOURCE_KIND: Mirrored resource kind, used as a label (default: namespace)
        VC_CHECKER_DELETION_PROPAGATION: Propagation policy for orphan deletes (default: Background)
    """

    model_config = SettingsConfigDict(
        env_prefix="VC_CHECKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Run the periodic checker")
    period_seconds: float = Field(
        default=60.0,
        description="Seconds between the end of one cycle and the start of the next",
        gt=0,
    )
    resource_kind: str = Field(
        default="namespace",
        description="Kind of mirrored resource this checker reconciles",
    )
    deletion_propagation: Literal["Background", "Foreground", "Orphan"] = Field(
        default="Background",
        description="Propagation policy attached to orphan deletes",
    )

    @field_validator("resource_kind")
    @classmethod
    def validate_resource_kind(cls, value: str) -> str:
        """Resource kind is used as a metric label and must be non-blank."""
        value = value.strip()
        if not value:
            raise ValueError("resource_kind must not be empty")
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Tenant Consistency Checker", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def checker(self) -> CheckerSettings:
        """Get checker settings."""
        return get_checker_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_checker_settings() -> CheckerSettings:
    """Get cached checker settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return CheckerSettings()
