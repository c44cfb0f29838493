"""Shared Access Signature (SAS) link generation for Azure Blob Storage.

Produces time-limited, read-only blob URLs signed with the account key
(service SAS, version 2012-02-12).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx

from azblob.auth.connection import ConnectionConfig
from azblob.auth.sharedkey import compute_signature
from azblob.core.uri_builder import UriBuilder

logger = logging.getLogger(__name__)


SIGNED_VERSION = "2012-02-12"
SIGNED_PERMISSIONS = "r"
SIGNED_RESOURCE = "b"
SIGNED_PROTOCOL = "https"
DEFAULT_LINK_LIFETIME = timedelta(hours=1)


def format_signed_expiry(expiry: datetime) -> str:
    """Render an expiry as ISO-8601 UTC with whole seconds, e.g. ``2025-12-04T10:30:00Z``.

    Naive datetimes are treated as local time.
    """
    return expiry.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_sas_string_to_sign(
    account_name: str,
    path: str,
    signed_expiry: str,
    signed_permissions: str = SIGNED_PERMISSIONS
) -> str:
    """Build the string to sign for a blob SAS.

    Format:
        signedpermissions\\n
        signedstart\\n        (empty)
        signedexpiry\\n
        /account/path\\n
        signedidentifier\\n   (empty)
        signedversion
    """
    parts = [
        signed_permissions,
        "",
        signed_expiry,
        f"/{account_name}{path}",
        "",
        SIGNED_VERSION,
    ]
    return "\n".join(parts)


def build_sas_query(
    config: ConnectionConfig,
    path: str,
    expiry: Optional[datetime] = None,
    now: Optional[datetime] = None
) -> Dict[str, str]:
    """Compute the SAS query parameters for a blob path.

    Args:
        config: Account connection settings
        path: Logical blob path, e.g. ``/container/blob``
        expiry: Link expiry (defaults to ``now`` plus one hour)
        now: Current time (defaults to the current UTC time)

    Returns:
        Query parameters ``sr``, ``sp``, ``se``, ``sv``, ``spr`` and ``sig``
    """
    if expiry is None:
        expiry = (now or datetime.now(timezone.utc)) + DEFAULT_LINK_LIFETIME
    signed_expiry = format_signed_expiry(expiry)

    string_to_sign = build_sas_string_to_sign(config.account_name, path, signed_expiry)
    signature = compute_signature(string_to_sign, config.account_key_bytes)

    return {
        "sr": SIGNED_RESOURCE,
        "sp": SIGNED_PERMISSIONS,
        "se": signed_expiry,
        "sv": SIGNED_VERSION,
        "spr": SIGNED_PROTOCOL,
        "sig": signature,
    }


def build_sas_link(
    config: ConnectionConfig,
    path: str,
    expiry: Optional[datetime] = None,
    now: Optional[datetime] = None
) -> httpx.URL:
    """Build a read-only SAS link for a blob. Performs no network call."""
    query = build_sas_query(config, path, expiry=expiry, now=now)
    logger.debug(f"Built SAS link for {path} expiring {query['se']}")
    return UriBuilder(config).build_uri(path, query)
