"""
azblob: Minimal Azure Blob Storage Client

An asyncio client for the Azure Blob Storage REST API with SharedKey request
signing and read-only SAS links.
"""

__version__ = "0.1.0"
__author__ = "azblob Team"

from .auth.connection import ConnectionConfig
from .exceptions import (
    AzBlobError,
    ConnectionStringParseError,
    InvalidBodyError,
    StorageError,
)
from .services.blob import BlobStorageClient, BlobType

__all__ = [
    "BlobStorageClient",
    "BlobType",
    "ConnectionConfig",
    "AzBlobError",
    "ConnectionStringParseError",
    "InvalidBodyError",
    "StorageError",
    "__version__",
]
