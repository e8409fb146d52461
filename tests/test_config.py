"""
Unit tests for configuration module.
"""
import pytest
from pydantic import ValidationError

from core.config import get_settings, reset_settings


def test_settings_defaults():
    """Test default configuration values."""
    settings = get_settings()
    assert settings.app_name == "Transaction Summary Service"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.aws_max_attempts == 3
    assert settings.object_key_prefix == "csv/"
    assert settings.email_secret_id == "EMAIL_SECRET"
    assert settings.email_recipient is None
    assert settings.email_subject == "Transaction Summary"
    assert settings.smtp_port == 587
    assert settings.input_encoding == "utf-8"
    assert settings.zero_count_average_policy == "omit"


def test_settings_from_environment(monkeypatch):
    """Test environment overrides."""
    monkeypatch.setenv("EMAIL_RECIPIENT", "owner@example.com")
    monkeypatch.setenv("SMTP_PORT", "2525")
    monkeypatch.setenv("ZERO_COUNT_AVERAGE_POLICY", "fail")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.email_recipient == "owner@example.com"
    assert settings.smtp_port == 2525
    assert settings.zero_count_average_policy == "fail"
    assert settings.log_level == "DEBUG"


def test_settings_validation_port(monkeypatch):
    """Test port validation."""
    monkeypatch.setenv("PORT", "99999")
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_smtp_port(monkeypatch):
    """Test SMTP port validation."""
    monkeypatch.setenv("SMTP_PORT", "0")
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_log_level(monkeypatch):
    """Test log level validation."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_zero_count_policy(monkeypatch):
    """Test average policy only accepts known values."""
    monkeypatch.setenv("ZERO_COUNT_AVERAGE_POLICY", "nan")
    with pytest.raises(ValidationError):
        get_settings()


@pytest.mark.parametrize("attempts", ["0", "11"])
def test_settings_validation_attempts(monkeypatch, attempts):
    """Test AWS retry attempt bounds."""
    monkeypatch.setenv("AWS_MAX_ATTEMPTS", attempts)
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_singleton():
    """Test settings singleton behavior."""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2

    reset_settings()
    assert get_settings() is not settings1
