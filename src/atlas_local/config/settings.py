"""Settings and configuration management for the Atlas Local extension backend."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ATLAS_LOCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server configuration
    socket_path: str = Field(
        default="/run/guest-services/backend.sock",
        description="Unix domain socket the backend listens on",
    )

    # Docker configuration
    docker_host: str | None = Field(
        default=None,
        description="Docker daemon host URL (defaults to Docker's standard detection)",
    )

    image: str = Field(
        default="mongodb/mongodb-atlas-local",
        description="Image used when launching new Atlas Local containers",
    )

    # Listing configuration
    include_stopped: bool = Field(
        default=True,
        description="List exited and created containers alongside running ones",
    )

    strict_mode: bool = Field(
        default=True,
        description="Fail the whole listing when a single container inspect fails",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log format (json or text)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
