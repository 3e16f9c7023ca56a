"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files
with validation and type conversion.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BoxRentalSettings(BaseSettings):
    """
    Settings for the box rental toolkit.

    Settings are loaded in this order of precedence:
    1. Environment variables
    2. .env file in current directory
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Backend API
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the rental backend (serves /api/...)"
    )

    api_timeout: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="API request timeout in seconds"
    )

    api_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Maximum number of retry attempts for failed requests"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(
        default="json",
        description="Log output format (json, text)"
    )

    service_name: str = Field(
        default="boxrental",
        description="Service name for logging"
    )

    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )

    # Public tracking links
    public_base_url: str = Field(
        default="https://plataforma.arriendocajas.cl",
        description="Public domain used for tracking links in production"
    )

    dev_domain: Optional[str] = Field(
        default=None,
        description="Development host name used for tracking links outside production"
    )

    # Business rules
    guarantee_per_box: int = Field(
        default=2000,
        ge=0,
        description="Guarantee charged per rented box (CLP)"
    )

    total_boxes: int = Field(
        default=50,
        ge=0,
        description="Fleet size used for local availability estimates"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format is supported."""
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {', '.join(sorted(valid_formats))}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of: {', '.join(sorted(valid_envs))}")
        return v.lower()

    @field_validator("api_base_url", "public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base URLs must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("dev_domain")
    @classmethod
    def validate_dev_domain(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    def get_api_headers(self) -> dict:
        """Get standard headers for backend API calls."""
        return {
            "User-Agent": f"{self.service_name}/1.0",
            "Accept": "application/json",
        }


@lru_cache()
def get_settings() -> BoxRentalSettings:
    """
    Get cached settings instance.

    Settings are read once per process; call ``get_settings.cache_clear()``
    to reload them (tests do this after patching the environment).
    """
    return BoxRentalSettings()


def settings() -> BoxRentalSettings:
    """Get application settings."""
    return get_settings()
