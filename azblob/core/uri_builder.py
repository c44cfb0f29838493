"""Endpoint URI construction for Azure Blob Storage.

Maps a logical blob path (``/container/blob``) onto the account's blob
endpoint, either composed from the account name and endpoint suffix or taken
from an explicit ``BlobEndpoint`` override (for example Azurite's
``http://127.0.0.1:10000/devstoreaccount1``).
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional

import httpx

if TYPE_CHECKING:
    from azblob.auth.connection import ConnectionConfig

DEFAULT_PROTOCOL = "https"
DEFAULT_ENDPOINT_SUFFIX = "core.windows.net"


@dataclass(frozen=True)
class PathSegments:
    """Container name and optional remainder of a logical path."""

    container: str
    rest: Optional[str] = None


class UriBuilder:
    """Build fully qualified blob endpoint URIs for one account.

    Example:
        builder = UriBuilder(ConnectionConfig.parse(connection_string))
        builder.build_uri("/container/blob")
        # https://acct.blob.core.windows.net/container/blob
    """

    def __init__(self, config: "ConnectionConfig"):
        self.config = config

    def build_uri(
        self,
        path: str = "/",
        query_parameters: Optional[Mapping[str, str]] = None
    ) -> httpx.URL:
        """Build the URI for a path.

        Args:
            path: Logical path, e.g. ``/container/blob``
            query_parameters: Query parameters, attached in insertion order

        Returns:
            Fully qualified URL
        """
        if not path.startswith("/"):
            path = f"/{path}"

        if self.config.blob_endpoint:
            # Override: keep the endpoint's own path as prefix
            base = httpx.URL(self.config.blob_endpoint)
            url = base.copy_with(path=f"{base.path.rstrip('/')}{path}", query=None)
        else:
            scheme = self.config.default_endpoints_protocol or DEFAULT_PROTOCOL
            suffix = self.config.endpoint_suffix or DEFAULT_ENDPOINT_SUFFIX
            host = f"{self.config.account_name}.blob.{suffix}"
            url = httpx.URL(f"{scheme}://{host}").copy_with(path=path)

        if query_parameters:
            url = url.copy_with(params=dict(query_parameters))
        return url


def build_uri(
    config: "ConnectionConfig",
    path: str = "/",
    query_parameters: Optional[Mapping[str, str]] = None
) -> httpx.URL:
    """Shortcut for ``UriBuilder(config).build_uri(path, query_parameters)``."""
    return UriBuilder(config).build_uri(path, query_parameters)


def split_path(path: str) -> PathSegments:
    """
    Split a logical path into container and remainder.

    One leading ``/`` is stripped, then the path is split on the first
    remaining ``/``. ``rest`` is ``None`` when nothing follows the container.

    Args:
        path: Logical path, e.g. ``/mycontainer/prefix-``

    Returns:
        PathSegments(container, rest)
    """
    stripped = path[1:] if path.startswith("/") else path
    container, sep, rest = stripped.partition("/")
    if not sep or not rest:
        return PathSegments(container=container, rest=None)
    return PathSegments(container=container, rest=rest)
