"""
azblob Authentication Module.

Connection string parsing and request signing for Azure Blob Storage.
Supports SharedKey header signing and read-only SAS links.

Author: azblob Team
Date: 2026-10-18
"""

from azblob.auth.connection import ConnectionConfig
from azblob.auth.request import SignableRequest
from azblob.auth.sharedkey import (
    API_VERSION,
    SharedKeySigner,
    build_canonicalized_headers,
    build_canonicalized_resource,
    build_string_to_sign,
    compute_signature,
    format_http_date,
)
from azblob.auth.sas import (
    SIGNED_VERSION,
    build_sas_link,
    build_sas_query,
    build_sas_string_to_sign,
    format_signed_expiry,
)

__all__ = [
    # Connection
    "ConnectionConfig",
    "SignableRequest",
    # SharedKey
    "API_VERSION",
    "SharedKeySigner",
    "build_canonicalized_headers",
    "build_canonicalized_resource",
    "build_string_to_sign",
    "compute_signature",
    "format_http_date",
    # SAS
    "SIGNED_VERSION",
    "build_sas_link",
    "build_sas_query",
    "build_sas_string_to_sign",
    "format_signed_expiry",
]
