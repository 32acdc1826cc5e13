"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Claude API (strategist + analyst roles)
    ANTHROPIC_API_KEY: Optional[str] = None

    # Perplexity (researcher role)
    PERPLEXITY_API_KEY: Optional[str] = None

    # Bright Data (web search / scrape / social profiles) - optional
    BRIGHT_DATA_API_TOKEN: Optional[str] = None

    # Role -> model mapping
    STRATEGIST_MODEL: str = "claude-sonnet-4-20250514"
    ANALYST_MODEL: str = "claude-sonnet-4-20250514"
    RESEARCHER_MODEL: str = "sonar-reasoning-pro"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Research tuning
    COMPETITOR_FALLBACK_THRESHOLD: int = 40
    MAX_STRATEGY_QUERIES: int = 5
    MAX_COMPETITOR_CANDIDATES: int = 5

    # Timeouts (seconds)
    MODEL_TIMEOUT: float = 30.0
    SEARCH_TIMEOUT: float = 10.0
    PHASE_TIMEOUT: float = 90.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
