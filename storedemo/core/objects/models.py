"""
Domain models for stored objects.

These models describe what lives in the bucket and what the service hands
back to callers. They know nothing about boto3 or HTTP; the storage client
builds them from SDK responses and the routes turn them into JSON.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote


@dataclass(frozen=True)
class ObjectOwner:
    """Store-assigned owner of an object."""
    display_name: str = ""
    id: str = ""


@dataclass(frozen=True)
class StoredObject:
    """
    One object as reported by a bucket listing.

    Frozen because objects are never mutated once stored. A new upload
    under the same key is a new object as far as we are concerned.
    """
    key: str
    last_modified: datetime
    etag: str
    size: int
    storage_class: str = "STANDARD"
    owner: Optional[ObjectOwner] = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Object key cannot be empty")
        if self.size < 0:
            raise ValueError("Object size cannot be negative")


@dataclass(frozen=True)
class UploadedObject:
    """
    Descriptor returned by a successful upload.

    Mirrors the payload of a managed S3 upload (Key, Bucket, ETag,
    Location) so callers get the same body whichever store is behind us.
    """
    key: str
    bucket: str
    etag: str
    location: str
    version_id: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "Key": self.key,
            "Bucket": self.bucket,
            "ETag": self.etag,
            "Location": self.location,
        }
        if self.version_id:
            payload["VersionId"] = self.version_id
        return payload


def iso_timestamp(moment: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Example: 2024-05-01T10:20:30.123Z. Naive datetimes are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_object_key(filename: str, now: Optional[datetime] = None) -> str:
    """
    Build the storage key for an upload: "{iso_timestamp}-{filename}".

    The timestamp prefix makes collisions unlikely but does not rule them
    out; two uploads of the same filename in the same millisecond share a
    key and the store keeps the last one.
    """
    moment = now or datetime.now(timezone.utc)
    return f"{iso_timestamp(moment)}-{filename}"


def public_source_url(base_url: str, key: str) -> str:
    """
    Build the public URL of an object.

    Keys are percent-encoded the way S3 encodes them in object URLs:
    "/" and "~" stay as-is, everything outside the unreserved set is
    escaped (":" becomes %3A, " " becomes %20).
    """
    return f"{base_url.rstrip('/')}/{quote(key, safe='/~')}"


def to_public_entry(obj: StoredObject, base_url: str) -> dict[str, Any]:
    """Reshape a StoredObject into the listing entry returned by GET /."""
    owner = obj.owner or ObjectOwner()
    return {
        "Key": obj.key,
        "Source": public_source_url(base_url, obj.key),
        "LastModified": iso_timestamp(obj.last_modified),
        "ETag": obj.etag,
        "Size": obj.size,
        "StorageClass": obj.storage_class,
        "Owner": {
            "DisplayName": owner.display_name,
            "ID": owner.id,
        },
    }
