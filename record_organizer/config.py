"""
Application settings and logging setup for the Record Organizer.

Settings are read from environment variables prefixed with
``RECORD_ORGANIZER_`` or from a local ``.env`` file.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the service."""

    app_name: str = Field(default="Record Organizer")
    app_version: str = Field(default="1.0.0")

    # SQLite database URL - file-based storage
    database_url: str = Field(default="sqlite:///./record_organizer.db")
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    cors_origins: list[str] = Field(default=["*"], description="CORS allowed origins")

    model_config = SettingsConfigDict(
        env_prefix="RECORD_ORGANIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )
