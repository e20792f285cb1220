"""
Object storage client for uploaded images.

Talks to any S3-compatible endpoint (LocalStack, MinIO, AWS S3) through
boto3. Mock mode keeps objects in memory, enabling API testing without
provisioning an actual bucket.

SDK failures are translated into two errors:
- StoreUnavailable: the endpoint could not be reached
- StoreRejected: the endpoint answered with an error
Both carry the store's own code and message so routes can forward them
verbatim.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ...core.objects.models import (
    ObjectOwner,
    StoredObject,
    UploadedObject,
    public_source_url,
)

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """
    Raised when storage operations fail.

    The payload mirrors the error shape boto3 exposes on ClientError
    (Error.Code / Error.Message) plus the HTTP status the store returned,
    when there was one.
    """

    http_status: int

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        return {
            "Error": {
                "Code": self.code,
                "Message": self.message,
            },
            "StatusCode": self.status_code,
        }


class StoreUnavailable(StorageError):
    """Connection, DNS or timeout failure reaching the store."""

    http_status = 503


class StoreRejected(StorageError):
    """The store answered with an error (unknown bucket, access denied, ...)."""

    http_status = 502


def translate_sdk_error(exc: Union[BotoCoreError, ClientError]) -> StorageError:
    """Map a boto3/botocore exception onto our storage error taxonomy."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        metadata = exc.response.get("ResponseMetadata", {})
        return StoreRejected(
            code=error.get("Code", "Unknown"),
            message=error.get("Message", str(exc)),
            status_code=metadata.get("HTTPStatusCode"),
        )
    return StoreUnavailable(code=type(exc).__name__, message=str(exc))


@dataclass
class StorageConfig:
    """
    Configuration for an S3-compatible object store.

    Built explicitly from Settings by the app factory and handed to the
    client, so tests can construct one without touching the environment.
    """
    endpoint_url: str
    bucket_name: str
    public_base_url: str
    access_key_id: str = "test"
    secret_access_key: str = "test"
    region: str = "us-east-1"


class ObjectStoreClient(Protocol):
    """
    Protocol for object storage operations.

    Routes depend on this protocol, not on boto3, so tests can provide
    fakes and the backend can be swapped.
    """

    @property
    def bucket_name(self) -> str:
        ...

    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> UploadedObject:
        """Store data under key and return the upload descriptor."""
        ...

    async def list_objects(self) -> list[StoredObject]:
        """Return every object in the bucket (single call, no pagination)."""
        ...

    async def ping(self) -> None:
        """Raise StorageError if the bucket is not reachable."""
        ...


class S3ObjectStoreClient:
    """
    S3-compatible object store client.

    boto3 is synchronous, so each call is pushed onto the threadpool to
    keep the event loop free while the request is in flight.
    """

    def __init__(self, config: StorageConfig, s3_client: Any = None) -> None:
        self._config = config

        if s3_client is None:
            boto_config = Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            s3_client = boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                region_name=config.region,
                config=boto_config,
            )

        self._s3_client = s3_client

        logger.info(
            "Initialized S3 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    @property
    def bucket_name(self) -> str:
        return self._config.bucket_name

    async def upload(
        self,
        data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> UploadedObject:
        """
        Upload a payload to the configured bucket.

        The key is used as-is; naming is the caller's job.
        """
        params: dict[str, Any] = {
            "Bucket": self._config.bucket_name,
            "Key": key,
            "Body": data,
        }
        if content_type:
            params["ContentType"] = content_type

        try:
            response = await run_in_threadpool(self._s3_client.put_object, **params)
        except (BotoCoreError, ClientError) as e:
            error = translate_sdk_error(e)
            logger.error(
                "Failed to upload object",
                extra={"key": key, "code": error.code, "error": error.message}
            )
            raise error from e

        logger.info(
            "Uploaded object",
            extra={"key": key, "size_bytes": len(data)}
        )

        return UploadedObject(
            key=key,
            bucket=self._config.bucket_name,
            etag=response.get("ETag", ""),
            location=public_source_url(self._config.public_base_url, key),
            version_id=response.get("VersionId"),
        )

    async def list_objects(self) -> list[StoredObject]:
        """
        List the bucket in one ListObjectsV2 call.

        Only the first page (up to 1000 keys) is returned. FetchOwner is
        set because V2 omits owners otherwise.
        """
        try:
            response = await run_in_threadpool(
                self._s3_client.list_objects_v2,
                Bucket=self._config.bucket_name,
                FetchOwner=True,
            )
        except (BotoCoreError, ClientError) as e:
            error = translate_sdk_error(e)
            logger.error(
                "Failed to list objects",
                extra={"bucket": self._config.bucket_name, "code": error.code, "error": error.message}
            )
            raise error from e

        if response.get("IsTruncated"):
            logger.warning(
                "Listing truncated, only the first page is returned",
                extra={"bucket": self._config.bucket_name}
            )

        return [self._to_stored_object(item) for item in response.get("Contents", [])]

    async def ping(self) -> None:
        try:
            await run_in_threadpool(
                self._s3_client.head_bucket,
                Bucket=self._config.bucket_name,
            )
        except (BotoCoreError, ClientError) as e:
            raise translate_sdk_error(e) from e

    @staticmethod
    def _to_stored_object(item: dict[str, Any]) -> StoredObject:
        owner = item.get("Owner")
        return StoredObject(
            key=item["Key"],
            last_modified=item["LastModified"],
            etag=item.get("ETag", ""),
            size=item.get("Size", 0),
            storage_class=item.get("StorageClass", "STANDARD"),
            owner=ObjectOwner(
                display_name=owner.get("DisplayName", ""),
                id=owner.get("ID", ""),
            ) if owner else None,
        )


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockObjectStoreClient:
    """
    In-memory object store for local development.

    Objects live in a dict keyed by storage key. Listings come back in key
    order, like S3's lexicographic ordering.
    """

    OWNER = ObjectOwner(display_name="local", id="local-owner")

    def __init__(self, bucket_name: str = "uploads", public_base_url: str = "mock://storage/uploads") -> None:
        self._bucket_name = bucket_name
        self._public_base_url = public_base_url
        self._objects: dict[str, StoredObject] = {}
        logger.info("Initialized mock storage client (in-memory)")

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def upload(
        self,
        data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> UploadedObject:
        """Store the object in memory."""
        etag = f'"{hashlib.md5(data).hexdigest()}"'
        self._objects[key] = StoredObject(
            key=key,
            last_modified=datetime.now(timezone.utc),
            etag=etag,
            size=len(data),
            owner=self.OWNER,
        )

        logger.debug(
            "Stored object in mock storage",
            extra={"key": key, "size_bytes": len(data)}
        )

        return UploadedObject(
            key=key,
            bucket=self._bucket_name,
            etag=etag,
            location=public_source_url(self._public_base_url, key),
        )

    async def list_objects(self) -> list[StoredObject]:
        return [self._objects[key] for key in sorted(self._objects)]

    async def ping(self) -> None:
        return None


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> ObjectStoreClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory client

    Returns:
        ObjectStoreClient implementation (S3 or Mock)
    """
    if mock_mode:
        if config is None:
            return MockObjectStoreClient()
        return MockObjectStoreClient(
            bucket_name=config.bucket_name,
            public_base_url=config.public_base_url,
        )

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3ObjectStoreClient(config)
