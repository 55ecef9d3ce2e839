"""
Configuration management for SkillMatch.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "skillmatch"
    username: str | None = None
    password: str | None = None
    users_collection: str = "users"


class MatchingSettings(BaseSettings):
    """Recommendation and search limits."""

    model_config = SettingsConfigDict(env_prefix="MATCH_")

    # Candidates pulled from the store before scoring
    candidate_pool_limit: int = Field(100, ge=1)
    # Results kept after ranking
    recommendation_limit: int = Field(20, ge=1)
    search_page_size: int = Field(20, ge=1)
    mutual_pool_limit: int = Field(1000, ge=1)

    # Thread pool size for scoring; 1 scores inline
    scoring_workers: int = 1

    @field_validator("scoring_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Fall back to inline scoring for non-positive values."""
        return max(1, v)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "skillmatch.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "SkillMatch"
    version: str = "0.1.0"
    description: str = "Skill-exchange matching and recommendation engine"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings


# Convenience exports
settings = get_settings()
