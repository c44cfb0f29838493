"""
Blob Storage Client

Async client for the Azure Blob Storage REST API: put, append, get, delete
and list blobs, and read-only SAS links.

Author: azblob Team
Date: 2026
"""

import logging
from datetime import datetime
from typing import Dict, Mapping, Optional

import httpx

from azblob.auth.connection import ConnectionConfig
from azblob.auth.request import SignableRequest
from azblob.auth.sas import build_sas_link
from azblob.auth.sharedkey import SharedKeySigner
from azblob.core.logging_config import log_with_context
from azblob.core.uri_builder import UriBuilder, split_path
from azblob.exceptions import InvalidBodyError, StorageError
from azblob.services.blob.models import BlobType, BodyValidator

logger = logging.getLogger(__name__)


TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class BlobStorageClient:
    """
    Client for one storage account.

    The connection settings are read-only after construction, so one client
    can serve any number of concurrent tasks. No call retries; transport
    errors from httpx propagate unchanged.

    Example:
        async with BlobStorageClient.from_connection_string(conn_str) as client:
            await client.put_blob("/container/hello.txt", body="Hello, World!")
            response = await client.get_blob("/container/hello.txt")
            try:
                data = await response.aread()
            finally:
                await response.aclose()
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 30.0,
        verify: bool = True
    ):
        """
        Initialize the client.

        Args:
            config: Parsed connection settings
            http_client: Transport to use; the caller keeps ownership of it
            timeout: Transport timeout for a client created here
            verify: TLS verification for a client created here
        """
        self.config = config
        self.uri_builder = UriBuilder(config)
        self.signer = SharedKeySigner(config)
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout, verify=verify)

    @classmethod
    def from_connection_string(cls, connection_string: str, **kwargs) -> "BlobStorageClient":
        """
        Create a client from a connection string.

        Raises:
            ConnectionStringParseError: If the connection string is invalid
        """
        return cls(ConnectionConfig.parse(connection_string), **kwargs)

    async def __aenter__(self) -> "BlobStorageClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP transport if this client created it."""
        if self._owns_http_client:
            await self._http.aclose()

    # ========== Writes ==========

    async def put_blob(
        self,
        path: str,
        body: Optional[str] = None,
        body_bytes: Optional[bytes] = None,
        *,
        blob_type: BlobType = BlobType.BLOCK_BLOB,
        content_type: Optional[str] = None,
        metadata: Optional[Mapping[str, str]] = None
    ) -> None:
        """
        Create or replace a blob.

        ``body`` and ``body_bytes`` are exclusive and one is mandatory. A
        block blob is written in one request. An append blob is first created
        empty; non-empty content is then sent with :meth:`append_block`. The
        two requests are not atomic: if the append fails, the empty blob
        remains.

        Args:
            path: Blob path, ``/container/blob``
            body: Text content (UTF-8 encoded)
            body_bytes: Binary content
            blob_type: Block or append blob
            content_type: Content-Type of the blob
            metadata: Metadata, sent as ``x-ms-meta-<key>`` headers

        Raises:
            InvalidBodyError: If body arguments are invalid (before any request)
            StorageError: If the service does not answer 201
        """
        _check_body(body, body_bytes)

        headers: Dict[str, str] = {"x-ms-blob-type": blob_type.display_name}
        for key, value in (metadata or {}).items():
            headers[f"x-ms-meta-{key}"] = value
        if content_type is not None:
            headers["content-type"] = content_type

        if blob_type == BlobType.BLOCK_BLOB:
            content = BodyValidator.encode(body, body_bytes)
            if body is not None and content_type is None:
                headers["content-type"] = TEXT_CONTENT_TYPE
        else:
            content = b""

        request = SignableRequest(
            "PUT", self.uri_builder.build_uri(path), headers=headers, body=content
        )
        await self._send_expecting_created(request)

        if blob_type == BlobType.APPEND_BLOB:
            if body or body_bytes:
                await self.append_block(path, body=body, body_bytes=body_bytes)
            else:
                logger.debug(f"Created empty append blob {path}")

    async def append_block(
        self,
        path: str,
        body: Optional[str] = None,
        body_bytes: Optional[bytes] = None
    ) -> None:
        """
        Append a block to an existing append blob.

        Raises:
            InvalidBodyError: If body arguments are invalid (before any request)
            StorageError: If the service does not answer 201
        """
        _check_body(body, body_bytes)

        headers: Dict[str, str] = {}
        if body is not None:
            headers["content-type"] = TEXT_CONTENT_TYPE

        request = SignableRequest(
            "PUT",
            self.uri_builder.build_uri(path, {"comp": "appendblock"}),
            headers=headers,
            body=BodyValidator.encode(body, body_bytes),
        )
        await self._send_expecting_created(request)

    # ========== Reads ==========

    async def get_blob(self, path: str) -> httpx.Response:
        """
        Get a blob.

        Returns the streamed response unread and with no status check; the
        caller reads and closes it.
        """
        request = SignableRequest("GET", self.uri_builder.build_uri(path))
        return await self._send(request)

    async def delete_blob(self, path: str) -> httpx.Response:
        """Delete a blob. Returns the streamed response with no status check."""
        request = SignableRequest("DELETE", self.uri_builder.build_uri(path))
        return await self._send(request)

    async def list_blobs_raw(self, path: str) -> httpx.Response:
        """
        List blobs of a container (raw API).

        ``path`` is ``/container`` or ``/container/prefix``. Returns the
        streamed response; ``await response.aread()`` gives the listing XML.
        """
        segments = split_path(path)
        query = {"restype": "container", "comp": "list"}
        if segments.rest is not None:
            query["prefix"] = segments.rest

        request = SignableRequest(
            "GET", self.uri_builder.build_uri(f"/{segments.container}", query)
        )
        return await self._send(request)

    def get_blob_link(self, path: str, expiry: Optional[datetime] = None) -> httpx.URL:
        """
        Get a read-only SAS link for a blob, valid until ``expiry``
        (default: one hour from now). Performs no network call.
        """
        return build_sas_link(self.config, path, expiry=expiry)

    # ========== Transport ==========

    async def _send(self, request: SignableRequest) -> httpx.Response:
        self.signer.sign(request)
        logger.debug(f"{request.method} {request.url.copy_with(query=None)}")
        return await self._http.send(request.to_httpx(), stream=True)

    async def _send_expecting_created(self, request: SignableRequest) -> None:
        response = await self._send(request)
        try:
            if response.status_code != 201:
                message = (await response.aread()).decode("utf-8", errors="replace")
                log_with_context(
                    logger,
                    logging.WARNING,
                    f"{request.method} {request.path} failed with HTTP {response.status_code}",
                    status_code=response.status_code,
                    request_id=response.headers.get("x-ms-request-id"),
                )
                raise StorageError(message, response.status_code, dict(response.headers))
            await response.aread()
        finally:
            await response.aclose()


def _check_body(body: Optional[str], body_bytes: Optional[bytes]) -> None:
    is_valid, error = BodyValidator.validate(body, body_bytes)
    if not is_valid:
        raise InvalidBodyError(error)
