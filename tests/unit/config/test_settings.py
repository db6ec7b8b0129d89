"""
Tests for settings configuration.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from thinkcyber_admin.config.settings import Settings, configure_logging


def test_settings_defaults(monkeypatch):
    """Test default settings values."""
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("API_TOKEN", raising=False)
    settings = Settings(_env_file=None, log_level="INFO")

    assert settings.app_name == "thinkcyber-admin"
    assert settings.api_base_url == "http://localhost:8000/api"
    assert settings.api_token == ""
    assert settings.has_api_token is False
    assert settings.request_timeout == 10.0
    assert settings.upload_timeout == 300.0
    assert settings.fetch_all_limit == 1000


def test_settings_from_environment(monkeypatch):
    """API_BASE_URL and API_TOKEN are read from the environment."""
    monkeypatch.setenv("API_BASE_URL", "https://cms.example.org/api/")
    monkeypatch.setenv("API_TOKEN", "secret")
    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://cms.example.org/api"
    assert settings.api_token == "secret"
    assert settings.has_api_token is True


def test_settings_strips_trailing_slash(gateway_settings):
    """Test base URL normalization."""
    assert not gateway_settings.api_base_url.endswith("/")


def test_settings_log_level_validation():
    """Test log level validation."""
    settings = Settings(_env_file=None, log_level="debug")
    assert settings.log_level == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")


@pytest.mark.parametrize("field", ["request_timeout", "upload_timeout"])
def test_settings_rejects_non_positive_timeouts(field):
    """A zero timeout would wait forever."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_configure_logging_sets_package_level():
    """configure_logging adjusts the package logger only once per handler."""
    configure_logging("WARNING")
    configure_logging("DEBUG")

    package_logger = logging.getLogger("thinkcyber_admin")
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1
