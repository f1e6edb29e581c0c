"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Activation settings
    activation_ttl_seconds: int = 900  # Token/code validity window (15 minutes)
    sweep_grace_seconds: int = 60  # How long expired records stay visible before sweeping
    token_bytes: int = 32  # Random bytes per token (hex doubles the length)

    # HTTP settings
    public_base_url: str | None = None  # Overrides Host/X-Forwarded-Proto for links
    cors_allow_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
