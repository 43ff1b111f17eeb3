"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    # MongoDB
    mongodb_uri: str = Field(default="", description="MongoDB connection string")
    mongodb_database: str = Field(
        default="devevent",
        description="Database used when the URI does not name one",
    )
    mongodb_timeout_ms: int = Field(
        default=5000,
        description="Server selection timeout in milliseconds",
    )

    # Application
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("mongodb_uri")
    @classmethod
    def strip_uri(cls, v: str) -> str:
        """Treat a whitespace-only URI as unset."""
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return Settings()
