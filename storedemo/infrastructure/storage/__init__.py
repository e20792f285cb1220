"""
Object storage integration for uploaded images.

Supports any S3-compatible endpoint via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockObjectStoreClient,
    ObjectStoreClient,
    S3ObjectStoreClient,
    StorageConfig,
    StorageError,
    StoreRejected,
    StoreUnavailable,
    create_storage_client,
)

__all__ = [
    "MockObjectStoreClient",
    "ObjectStoreClient",
    "S3ObjectStoreClient",
    "StorageConfig",
    "StorageError",
    "StoreRejected",
    "StoreUnavailable",
    "create_storage_client",
]
