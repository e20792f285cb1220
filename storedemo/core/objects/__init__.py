"""
Stored object models, key naming and public listing shapes.
"""

from .models import (
    ObjectOwner,
    StoredObject,
    UploadedObject,
    build_object_key,
    iso_timestamp,
    public_source_url,
    to_public_entry,
)

__all__ = [
    "ObjectOwner",
    "StoredObject",
    "UploadedObject",
    "build_object_key",
    "iso_timestamp",
    "public_source_url",
    "to_public_entry",
]
