"""
Custom exceptions for better error handling.
"""
from typing import Any, Dict, Optional


class TransactionSummaryException(Exception):
    """Base exception for all transaction summary errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MalformedInputError(TransactionSummaryException):
    """Raised when the tabular input cannot be decoded into 3-field rows."""
    pass


class InvalidDateError(TransactionSummaryException):
    """Raised when a date has no parseable or known month."""
    pass


class InvalidAmountError(TransactionSummaryException):
    """Raised when an amount is not a finite decimal number."""
    pass


class DivisionUndefinedError(TransactionSummaryException):
    """Raised when an average is requested over zero transactions."""
    pass


class DeliveryError(TransactionSummaryException):
    """Raised when the report cannot be handed to the mail transport."""
    pass


class StorageError(TransactionSummaryException):
    """Raised when the input object cannot be retrieved."""
    pass


class CredentialError(TransactionSummaryException):
    """Raised when delivery credentials are missing or malformed."""
    pass


class InvalidEventError(TransactionSummaryException):
    """Raised when a trigger event does not reference exactly one object."""
    pass


class ConfigurationError(TransactionSummaryException):
    """Raised when configuration is invalid."""
    pass


INPUT_ERRORS = (
    MalformedInputError,
    InvalidDateError,
    InvalidAmountError,
    DivisionUndefinedError,
)

COLLABORATOR_ERRORS = (
    StorageError,
    CredentialError,
    DeliveryError,
)
