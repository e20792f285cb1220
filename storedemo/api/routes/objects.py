"""
Object upload and listing endpoints.

POST / takes a multipart "image" file and stores it under
"{iso_timestamp}-{filename}". GET / lists the bucket in a simplified
public shape with a Source URL per object.

Store errors are forwarded as-is in the body. The status code is 502/503
unless ERRORS_AS_200 is set, in which case failures look like successes
on the wire and callers have to inspect the body.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import JSONResponse

from ...config.settings import Settings
from ...core.objects.models import build_object_key, to_public_entry
from ...infrastructure.storage.client import StorageError
from ..dependencies import SettingsDep, StorageClientDep

logger = logging.getLogger(__name__)

router = APIRouter()


def storage_error_response(error: StorageError, settings: Settings) -> JSONResponse:
    """Render a store error as the raw payload with the configured status."""
    status_code = status.HTTP_200_OK if settings.errors_as_200 else error.http_status
    return JSONResponse(status_code=status_code, content=error.to_payload())


@router.post(
    "/",
    status_code=status.HTTP_200_OK,
    summary="Upload an image",
    description="Store the uploaded image in the bucket under a timestamped key",
)
async def upload_image(
    image: Annotated[UploadFile, File(description="Image file to store")],
    storage: StorageClientDep,
    settings: SettingsDep,
) -> Any:
    data = await image.read()
    key = build_object_key(image.filename)

    logger.info(
        "Processing upload",
        extra={
            "key": key,
            "content_type": image.content_type,
            "size_bytes": len(data),
        }
    )

    try:
        uploaded = await storage.upload(data, key, content_type=image.content_type)
    except StorageError as e:
        logger.error(
            "Upload failed",
            extra={"key": key, "code": e.code, "error": e.message}
        )
        return storage_error_response(e, settings)

    return uploaded.to_payload()


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="List stored objects",
    description="List every object in the bucket with a public Source URL",
)
async def list_objects(
    storage: StorageClientDep,
    settings: SettingsDep,
) -> Any:
    try:
        objects = await storage.list_objects()
    except StorageError as e:
        logger.error(
            "Listing failed",
            extra={"code": e.code, "error": e.message}
        )
        return storage_error_response(e, settings)

    logger.debug("Listed objects", extra={"count": len(objects)})

    return [to_public_entry(obj, settings.storage_public_base) for obj in objects]
