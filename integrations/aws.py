"""
Shared boto3 helpers.
Read-only AWS calls retry transient failures with exponential backoff.
"""
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

TRANSIENT_ERROR_CODES = {
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "RequestLimitExceeded",
    "RequestTimeout",
    "RequestTimeoutException",
    "SlowDown",
    "InternalError",
    "InternalServiceError",
    "ServiceUnavailable",
}


def create_client(service_name: str, region_name: str) -> Any:
    """Create a boto3 client for the given service and region."""
    return boto3.client(service_name, region_name=region_name)


def is_transient(exc: BaseException) -> bool:
    """True for connection failures, throttling and 5xx responses."""
    if isinstance(exc, BotoCoreError):
        return True
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode") or 0
        return error.get("Code") in TRANSIENT_ERROR_CODES or status >= 500
    return False


def retrying(max_attempts: int, backoff: float = 1.0) -> Retrying:
    """
    Build a tenacity controller for a read-only AWS call.

    Args:
        max_attempts: Total attempts including the first one
        backoff: Multiplier for the exponential wait (0 disables waiting)
    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=backoff, min=0, max=8),
        retry=retry_if_exception(is_transient),
        reraise=True,
    )
