"""
Configuration management for SmartHire.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smarthire.utils.constants import RECOMMENDATION_LIMIT


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "smarthire"
DATA_DIR = ROOT_DIR / "data"


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "smarthire"
    username: str | None = None
    password: str | None = None


class StorageSettings(BaseSettings):
    """Resume upload storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    upload_dir: Path = ROOT_DIR / "uploads"
    max_resume_bytes: int = 5 * 1024 * 1024

    @field_validator("max_resume_bytes")
    @classmethod
    def validate_max_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_resume_bytes must be positive")
        return v


class EmailSettings(BaseSettings):
    """Outgoing notification email (SMTP) configuration."""

    model_config = SettingsConfigDict(env_prefix="EMAIL_")

    smtp_host: str | None = None
    smtp_port: int = 587
    username: str | None = None
    password: str | None = None
    from_name: str = "SmartHire"
    frontend_url: str = "http://localhost:5173"

    @property
    def enabled(self) -> bool:
        """Emails are only sent when the SMTP host and credentials are set."""
        return bool(self.smtp_host and self.username and self.password)


class MatchingSettings(BaseSettings):
    """Skill matching and recommendation configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCHING_")

    recommendation_limit: int = Field(default=RECOMMENDATION_LIMIT, ge=1)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "smarthire.log"
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
    name: str = "SmartHire"
    version: str = "0.1.0"
    description: str = "Hiring pipeline workflow and skill-based job matching"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
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
