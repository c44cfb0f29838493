"""
SharedKey request signing for Azure Blob Storage.

Builds the string-to-sign for a request, signs it with the account key and
attaches the ``Authorization`` header.

Reference: https://docs.microsoft.com/en-us/rest/api/storageservices/authorize-with-shared-key

Author: azblob Team
Date: 2026-10-18
"""

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Mapping, Optional

from azblob.auth.connection import ConnectionConfig
from azblob.auth.request import SignableRequest

logger = logging.getLogger(__name__)


API_VERSION = "2019-12-12"

# Headers read into the fixed part of the string-to-sign, in order.
# Content-Length is handled separately.
STANDARD_HEADERS_BEFORE_LENGTH = ("Content-Encoding", "Content-Language")
STANDARD_HEADERS_AFTER_LENGTH = (
    "Content-MD5",
    "Content-Type",
    "Date",
    "If-Modified-Since",
    "If-Match",
    "If-None-Match",
    "If-Unmodified-Since",
    "Range",
)


class SharedKeySigner:
    """
    Signs requests with the SharedKey scheme for one storage account.

    Holds no mutable state; one signer can be shared by concurrent tasks.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config

    def sign(self, request: SignableRequest, now: Optional[datetime] = None) -> None:
        """
        Sign a request in place.

        Sets ``x-ms-date``, ``x-ms-version`` and ``Authorization``.

        Args:
            request: Request to sign; must not be modified afterwards
            now: Signing time (defaults to current UTC time)
        """
        request.headers["x-ms-date"] = format_http_date(now or datetime.now(timezone.utc))
        request.headers["x-ms-version"] = API_VERSION

        string_to_sign = build_string_to_sign(request, self.config.account_name)
        signature = compute_signature(string_to_sign, self.config.account_key_bytes)

        request.headers["Authorization"] = (
            f"SharedKey {self.config.account_name}:{signature}"
        )
        logger.debug(f"Signed {request.method} {request.path} for account {self.config.account_name}")


def format_http_date(moment: datetime) -> str:
    """
    Format a datetime as an RFC 1123 HTTP date, e.g. ``Thu, 04 Dec 2025 10:30:00 GMT``.

    Naive datetimes are treated as local time.
    """
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def build_string_to_sign(request: SignableRequest, account_name: str) -> str:
    """
    Build the SharedKey string-to-sign for a request.

    Format:
        VERB\\n
        Content-Encoding\\n
        Content-Language\\n
        Content-Length\\n          (empty when 0)
        Content-MD5\\n
        Content-Type\\n
        Date\\n
        If-Modified-Since\\n
        If-Match\\n
        If-None-Match\\n
        If-Unmodified-Since\\n
        Range\\n
        CanonicalizedHeaders/account/path CanonicalizedResource

    Args:
        request: Request with all headers set
        account_name: Storage account name

    Returns:
        String to sign
    """
    content_length = request.content_length
    parts = [request.method]
    parts.extend(request.get_header(name) for name in STANDARD_HEADERS_BEFORE_LENGTH)
    parts.append(str(content_length) if content_length else "")
    parts.extend(request.get_header(name) for name in STANDARD_HEADERS_AFTER_LENGTH)

    canonicalized_headers = build_canonicalized_headers(request.headers)
    canonicalized_resource = build_canonicalized_resource(request.query_params)
    parts.append(
        f"{canonicalized_headers}/{account_name}{request.path}{canonicalized_resource}"
    )

    return "\n".join(parts)


def build_canonicalized_headers(headers: Mapping[str, str]) -> str:
    """
    Build CanonicalizedHeaders string.

    Rules:
    1. Include headers whose name starts with ``x-ms-`` as stored
    2. Format each as ``name:value\\n``
    3. Sort the lines lexicographically and concatenate

    Args:
        headers: Request headers

    Returns:
        Canonicalized headers string (empty if there are no x-ms- headers)
    """
    lines = sorted(
        f"{name}:{value}\n" for name, value in headers.items() if name.startswith("x-ms-")
    )
    return "".join(lines)


def build_canonicalized_resource(query_params: Mapping[str, str]) -> str:
    """
    Build the query part of the CanonicalizedResource string.

    Every query parameter is included, sorted by name, each as
    ``\\nname:value``.

    Args:
        query_params: Decoded query parameters

    Returns:
        Canonicalized resource suffix, or ``""`` without parameters
    """
    return "".join(f"\n{name}:{query_params[name]}" for name in sorted(query_params))


def compute_signature(string_to_sign: str, key_bytes: bytes) -> str:
    """
    Compute HMAC-SHA256 signature.

    Signature = Base64(HMAC-SHA256(UTF8(StringToSign), AccountKeyBytes))

    Args:
        string_to_sign: String to sign
        key_bytes: Decoded account key

    Returns:
        Base64-encoded signature
    """
    signature_bytes = hmac.new(
        key_bytes,
        string_to_sign.encode("utf-8"),
        hashlib.sha256
    ).digest()

    return base64.b64encode(signature_bytes).decode("utf-8")
