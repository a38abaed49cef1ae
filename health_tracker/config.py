"""
Centralized configuration for the Patient Health Tracker service.

Settings are read from environment variables and a .env file through
Pydantic's BaseSettings, giving one type-safe source of truth.
"""

from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Core API Settings ---
    PROJECT_NAME: str = "Patient Health Tracker API"
    API_V1_STR: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]

    # --- Database Settings ---
    DATABASE_URL: str = "sqlite:///./health_tracker.db"

    # --- Logging ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # --- Risk Assessment Settings ---
    # Readings fetched per recalculation; only the newest one is scored.
    RISK_HISTORY_WINDOW: int = Field(default=5, ge=1)

    # --- Patient Search ---
    SEARCH_RESULT_LIMIT: int = Field(default=5, ge=1)

    # --- Scheduler Settings ---
    SCHEDULER_ENABLED: bool = True
    DUE_ASSESSMENT_CHECK_HOUR: int = Field(default=6, ge=0, le=23)

    class Config:
        """Loads settings from the specified .env file."""
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create a single, globally accessible settings instance
settings = Settings()
