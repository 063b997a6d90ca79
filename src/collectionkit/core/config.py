"""Configuration management for collectionkit.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once, the first
time a default driver or logger needs it, and is immutable afterwards.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """collectionkit configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COLLECTIONKIT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    environment: Literal["development", "production", "testing"] = "development"

    # Database Settings
    mongo_url: str = "mongodb://localhost:27017/collectionkit"
    mongo_database: str = Field(
        default="collectionkit",
        description="Database used when mongo_url names none",
    )
    oplog_url: str | None = None
    mongo_server_selection_timeout_ms: int = 30000

    # Collection Defaults
    default_id_generation: Literal["MONGO", "STRING"] = "MONGO"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("default_id_generation", mode="before")
    @classmethod
    def upper_id_generation(cls, v: str) -> str:
        """Accept lowercase strategy names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
