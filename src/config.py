"""Project configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    project_root: Path = Path(__file__).parent.parent
    config_dir: Path = project_root / "config"

    # Experiments loaded at API startup (JSON). None disables loading.
    experiments_file: Path | None = None

    # Logging
    log_level: str = "INFO"


settings = Settings()
