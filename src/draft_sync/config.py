"""
Configuration module using pydantic-settings.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRAFT_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # View API Configuration
    api_title: str = "Draft Sync API"
    api_version: str = "0.1.0"
    api_description: str = "Read-only view of a live draft room"
    debug: bool = False

    # Draft server resource endpoints
    api_base_url: str = "http://localhost:8080"
    api_timeout: float = 30.0

    # Remembered draft id survives restarts here
    local_store_path: Path = Path.home() / ".draft_sync" / "local.json"

    log_level: str = "INFO"

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
