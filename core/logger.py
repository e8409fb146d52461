"""
Structured logging configuration for the transaction summary service.
Credentials registered at runtime are masked in every log record.
"""
import logging
import os
import sys
from typing import Optional, Set

REDACTED = "***"

_secrets: Set[str] = set()


def register_secret(value: Optional[str]) -> None:
    """
    Mask a sensitive value in all subsequent log output.

    Args:
        value: Secret string (empty values are ignored)
    """
    if value:
        _secrets.add(value)


class SecretRedactionFilter(logging.Filter):
    """Replace registered secret values in the formatted message."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not _secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in _secrets:
            redacted = redacted.replace(secret, REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env LOG_LEVEL or INFO.

    Returns:
        Configured logger instance
    """
    log_level = level or os.getenv("LOG_LEVEL", "INFO")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(getattr(logging, log_level.upper()))
        handler.addFilter(SecretRedactionFilter())

        formatter = logging.Formatter(
            fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
