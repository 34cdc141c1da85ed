"""API configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_title: str = "Fleet Experiments API"
    api_version: str = "0.1.0"
    api_description: str = "Experiment registry and variant assignment for the fleet dashboard"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # CORS
    cors_origins: list[str] = ["*"]


@lru_cache
def get_api_settings() -> APISettings:
    """Get cached API settings."""
    return APISettings()
