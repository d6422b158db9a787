"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Type-safe access to all environment variables with validation.

Usage:
    from utils.config import settings

    start_hour = settings.START_HOUR
    urls_file = settings.URLS_FILE
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Run Window Configuration
    START_HOUR: int = Field(default=3, ge=0, le=23)
    START_FROM_URL: int = Field(default=0, ge=0)
    WINDOW_MINUTES: int = Field(default=15, ge=0, le=59)
    TICK_INTERVAL_SECONDS: int = Field(default=300, gt=0)
    RUN_ONCE: bool = Field(default=False)

    # Queue Files
    URLS_FILE: str = Field(default="urls.txt")
    INDEXED_FILE: str = Field(default="indexed.txt")

    # Indexing API Configuration
    CREDENTIALS_FILE: str = Field(default="indexingKey.json")
    INDEXING_SCOPES: list[str] = Field(
        default=["https://www.googleapis.com/auth/indexing"]
    )
    NOTIFICATION_TYPE: str = Field(default="URL_UPDATED")
    DAILY_QUOTA: int = Field(default=200)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")
    LOG_OUTPUT: str = Field(default="both")
    LOG_DIR: str = Field(default="Logs")

    # Application Metadata
    ENVIRONMENT: str = Field(default="production")
    APP_NAME: str = Field(default="indexing-worker")
    APP_VERSION: str = Field(default="0.1.0")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
