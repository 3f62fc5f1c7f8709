"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Finishing Session Tracker"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Finishing Tracker contributors"]

    DEBUG: bool = False

    # Persistence
    STORAGE_BACKEND: Literal["sqlite", "file", "memory"] = "sqlite"
    STORAGE_KEY: str = "finishing_demo_v1"
    DATABASE_URL: str = "sqlite:///./finishing.db"
    DATA_DIR: str = "./data"

    # Copy undecodable stored values aside before they are discarded
    QUARANTINE_CORRUPT: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
