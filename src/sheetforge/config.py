"""Configuration management for sheetforge using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``SHEETFORGE_*`` variables, a few unprefixed aliases and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="SHEETFORGE_",
        extra="ignore",
        populate_by_name=True,
    )

    debug: bool = Field(default=False, description="Echo SQL statements")

    # Storage
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/sheetforge.db",
        description="Character store connection URL",
        alias="DATABASE_URL",
    )

    # Rules engine
    content_dir: Path | None = Field(
        default=None,
        description="Directory holding races.yaml and classes.yaml instead of the bundled data",
    )
    enforce_modifier_conditions: bool = Field(
        default=False,
        description="Skip modifiers whose conditions do not hold when computing stored sheets",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level", alias="LOG_LEVEL")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log renderer", alias="LOG_FORMAT"
    )

    @field_validator("content_dir", mode="before")
    @classmethod
    def _blank_content_dir(cls, value: object) -> object:
        # SHEETFORGE_CONTENT_DIR= means "use the bundled data"
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_log_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
