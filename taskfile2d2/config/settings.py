"""
Application Settings
===================

Application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode, forces DEBUG logging")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    # Translation Configuration
    identifier_strategy: str = Field(
        default="counter", description="Generated D2 identifiers: counter or uuid"
    )
    output_suffix: str = Field(
        default=".d2", description="Suffix appended to the input path when no output is given"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("identifier_strategy")
    @classmethod
    def validate_identifier_strategy(cls, v: str) -> str:
        """Validate identifier strategy."""
        allowed = {"counter", "uuid"}
        if v.lower() not in allowed:
            raise ValueError(f"Identifier strategy must be one of: {allowed}")
        return v.lower()

    @field_validator("output_suffix")
    @classmethod
    def validate_output_suffix(cls, v: str) -> str:
        """Output suffix must not be empty, the input file would be overwritten."""
        if not v:
            raise ValueError("Output suffix cannot be empty")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="TASKFILE2D2_",
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
