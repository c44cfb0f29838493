"""
Blob Storage Models

Blob types and request body validation for Azure Blob Storage writes.

Author: azblob Team
Date: 2026
"""

from enum import Enum
from typing import Optional, Tuple


class BlobType(str, Enum):
    """Blob types; the value is the ``x-ms-blob-type`` wire name."""
    BLOCK_BLOB = "BlockBlob"
    APPEND_BLOB = "AppendBlob"

    @property
    def display_name(self) -> str:
        return self.value


class BodyValidator:
    """
    Validates the content arguments of write calls.

    Rules:
    - Exactly one of ``body`` (text) or ``body_bytes`` (bytes) is given
    - ``body`` must be a str, ``body_bytes`` must be bytes-like
    """

    @classmethod
    def validate(
        cls,
        body: Optional[str],
        body_bytes: Optional[bytes]
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate body arguments.

        Args:
            body: Text content
            body_bytes: Binary content

        Returns:
            Tuple of (is_valid, error_message)
        """
        if body is None and body_bytes is None:
            return False, "body or body_bytes is required"

        if body is not None and body_bytes is not None:
            return False, "body and body_bytes are exclusive, pass only one of them"

        if body is not None and not isinstance(body, str):
            return False, f"body must be str, got {type(body).__name__}"

        if body_bytes is not None and not isinstance(body_bytes, (bytes, bytearray, memoryview)):
            return False, f"body_bytes must be bytes, got {type(body_bytes).__name__}"

        return True, None

    @staticmethod
    def encode(body: Optional[str], body_bytes: Optional[bytes]) -> bytes:
        """Return the content as bytes; text is UTF-8 encoded."""
        if body_bytes is not None:
            return bytes(body_bytes)
        return (body or "").encode("utf-8")
