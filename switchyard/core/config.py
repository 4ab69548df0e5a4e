"""Library configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SWITCHYARD_LOG_LEVEL: str = Field(default="info")
    SWITCHYARD_LOG_STDOUT: bool = Field(default=False)
    SWITCHYARD_LOG_DIR: Path | None = Field(default=None)
    SWITCHYARD_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")

    # Driver name -> handler name used when code sets no default handler.
    SWITCHYARD_DEFAULT_HANDLERS: dict[str, str] = Field(default_factory=dict)


settings = Settings()
config = settings  # Alias for backward compatibility


__all__ = ["Settings", "settings", "config"]
