"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TRAINER_LOG_LEVEL: str = Field(default="info")
    TRAINER_LOG_DIR: Path | None = Field(default=None)
    DATA_DIR: Path = Field(default=Path("/data"))

    # Locale used when a request's locale has no configured template pool
    DEFAULT_LOCALE: str = Field(default="en")
    # Optional override for the packaged prompts_data.json
    PROMPTS_PATH: Path | None = Field(default=None)

    STREAK_CALLOUT_THRESHOLD: int = Field(default=3, ge=1)
    # Sessions idle for longer than this are discarded; <= 0 disables expiry
    SESSION_TTL_SECONDS: int = Field(default=3600)

    API_TOKEN: str | None = Field(default=None)
    HEALTHCHECK_API_TOKEN: str | None = Field(default=None)
    ENABLE_AUTH: bool = Field(default=True)


settings = Settings()
config = settings  # Alias for backward compatibility


__all__ = ["Settings", "settings", "config"]
