"""
Exceptions for azblob.

Author: azblob Team
Date: 2026-10-18
"""

from typing import Dict, Optional


class AzBlobError(Exception):
    """Base exception for azblob errors."""

    def __init__(self, message: str, error_code: str = "AzBlobError"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConnectionStringParseError(AzBlobError):
    """Raised when a connection string is malformed or incomplete."""

    def __init__(self, message: str, connection_string: str):
        self.connection_string = connection_string
        super().__init__(message, "ConnectionStringParseError")


class InvalidBodyError(AzBlobError, ValueError):
    """Raised when body and body_bytes are both given, or neither is."""

    def __init__(self, message: str = "Exactly one of body or body_bytes is required"):
        super().__init__(message, "InvalidBody")


class StorageError(AzBlobError):
    """
    Raised when a write or append call returns an unexpected status.

    Carries the response body, status code and headers verbatim.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        headers: Optional[Dict[str, str]] = None
    ):
        self.status_code = status_code
        self.headers = dict(headers or {})
        super().__init__(message, "StorageError")

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"
