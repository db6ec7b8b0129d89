"""
Application settings and configuration management.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from thinkcyber_admin import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="thinkcyber-admin")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Backend
    api_base_url: str = Field(default="http://localhost:8000/api")
    api_token: str = Field(default="")

    # Performance
    request_timeout: float = Field(default=10.0)
    upload_timeout: float = Field(default=300.0)
    fetch_all_limit: int = Field(default=1000)

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the backend base URL so endpoints can be joined safely."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("request_timeout", "upload_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeouts must be positive; the gateway never waits indefinitely."""
        if v <= 0:
            raise ValueError(f"Timeout must be positive: {v}")
        return v

    @property
    def has_api_token(self) -> bool:
        """Check if a default bearer token is configured."""
        return bool(self.api_token)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """
    Configure the ``thinkcyber_admin`` logger hierarchy.

    Parameters
    ----------
    level : str | None, optional
        Log level name. Falls back to the configured ``log_level``.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger("thinkcyber_admin")
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


# Global settings instance
settings = get_settings()
