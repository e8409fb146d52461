"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from typing import Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import Field, validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Transaction Summary Service", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # AWS
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    aws_max_attempts: int = Field(default=3, alias="AWS_MAX_ATTEMPTS")
    object_key_prefix: str = Field(default="csv/", alias="OBJECT_KEY_PREFIX")
    email_secret_id: str = Field(default="EMAIL_SECRET", alias="EMAIL_SECRET_ID")

    # Delivery
    email_recipient: Optional[str] = Field(default=None, alias="EMAIL_RECIPIENT")
    email_subject: str = Field(default="Transaction Summary", alias="EMAIL_SUBJECT")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_timeout: int = Field(default=30, alias="SMTP_TIMEOUT")

    # Processing
    input_encoding: str = Field(default="utf-8", alias="INPUT_ENCODING")
    zero_count_average_policy: Literal["omit", "fail"] = Field(
        default="omit", alias="ZERO_COUNT_AVERAGE_POLICY"
    )

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @validator("port", "smtp_port")
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @validator("aws_max_attempts")
    def validate_attempts(cls, v):
        """Validate retry attempts setting."""
        if v < 1:
            raise ValueError("AWS max attempts must be at least 1")
        if v > 10:
            raise ValueError("AWS max attempts should not exceed 10")
        return v

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
