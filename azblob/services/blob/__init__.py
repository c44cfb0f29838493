"""
Blob Storage Service

Client for Azure Blob Storage: block and append blob writes, reads,
deletes, raw listing and SAS links.
"""

from .client import BlobStorageClient
from .models import BlobType, BodyValidator

__all__ = [
    "BlobStorageClient",
    "BlobType",
    "BodyValidator",
]
