"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RESTHEADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Headers
    api_version: str | None = Field(
        default=None,
        description="api-version header used by the CLI when none is given",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer (console for humans, json for collectors)",
    )

    # Signing
    signature_max_age_seconds: float = Field(
        default=300.0,
        description="Max age (seconds) of a signed date accepted by `restheader verify`",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
