"""
Connection string parsing for Azure Storage accounts.

A connection string is a ``;``-separated list of ``key=value`` pairs, e.g.::

    DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=...;EndpointSuffix=core.windows.net

Author: azblob Team
Date: 2026-10-18
"""

import base64
import binascii
import logging
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from azblob.exceptions import ConnectionStringParseError

logger = logging.getLogger(__name__)


DEFAULT_ENDPOINTS_PROTOCOL = "DefaultEndpointsProtocol"
ENDPOINT_SUFFIX = "EndpointSuffix"
ACCOUNT_NAME = "AccountName"
ACCOUNT_KEY = "AccountKey"
BLOB_ENDPOINT = "BlobEndpoint"

RECOGNIZED_KEYS = (
    DEFAULT_ENDPOINTS_PROTOCOL,
    ENDPOINT_SUFFIX,
    ACCOUNT_NAME,
    ACCOUNT_KEY,
    BLOB_ENDPOINT,
)


class ConnectionConfig(BaseModel):
    """
    Parsed, immutable storage account connection settings.

    Built once with :meth:`parse` and shared read-only by the URI builder
    and the request signers.
    """

    model_config = ConfigDict(frozen=True)

    account_name: str
    account_key: str = Field(repr=False)
    account_key_bytes: bytes = Field(repr=False)
    default_endpoints_protocol: Optional[str] = None
    endpoint_suffix: Optional[str] = None
    blob_endpoint: Optional[str] = None
    extras: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def parse(cls, connection_string: str) -> "ConnectionConfig":
        """
        Parse a connection string.

        Args:
            connection_string: ``;``-separated ``key=value`` pairs

        Returns:
            ConnectionConfig instance

        Raises:
            ConnectionStringParseError: If a segment has no ``=``, a required
                key is missing, or the account key is not valid base64
        """
        values: Dict[str, str] = {}

        for segment in connection_string.split(";"):
            if not segment:
                continue

            key, sep, value = segment.partition("=")
            if not sep:
                raise ConnectionStringParseError(
                    f"Failed to parse connection string: segment without '=' "
                    f"(key '{key}')",
                    connection_string,
                )
            if not key:
                raise ConnectionStringParseError(
                    "Failed to parse connection string: empty key",
                    connection_string,
                )
            values[key] = value

        for required in (ACCOUNT_NAME, ACCOUNT_KEY):
            if not values.get(required):
                raise ConnectionStringParseError(
                    f"Failed to parse connection string: missing {required}",
                    connection_string,
                )

        try:
            key_bytes = base64.b64decode(values[ACCOUNT_KEY], validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ConnectionStringParseError(
                f"Failed to parse connection string: invalid {ACCOUNT_KEY}: {exc}",
                connection_string,
            ) from exc

        extras = {k: v for k, v in values.items() if k not in RECOGNIZED_KEYS}
        if extras:
            logger.debug(f"Ignoring unrecognized connection string keys: {sorted(extras)}")

        return cls(
            account_name=values[ACCOUNT_NAME],
            account_key=values[ACCOUNT_KEY],
            account_key_bytes=key_bytes,
            default_endpoints_protocol=values.get(DEFAULT_ENDPOINTS_PROTOCOL),
            endpoint_suffix=values.get(ENDPOINT_SUFFIX),
            blob_endpoint=values.get(BLOB_ENDPOINT),
            extras=extras,
        )
