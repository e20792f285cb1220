"""
Resource API root and status endpoints.

The business routes for the DynamoDB-backed resource are not part of this
service yet; these endpoints only tell callers the API is up.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.objects.models import iso_timestamp
from ..dependencies import SettingsDep

router = APIRouter()


class MessageResponse(BaseModel):
    message: str = Field(description="Greeting from the resource API")


class StatusResponse(BaseModel):
    """Status payload: service state, API identity and server time."""
    status: str = Field(description="Always 'ok' while the process serves requests")
    api: str = Field(description="API title and version")
    time: str = Field(description="Server time, ISO-8601 UTC")


@router.get(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="API root",
)
async def root(settings: SettingsDep) -> MessageResponse:
    return MessageResponse(message=f"{settings.api_title} resource API")


@router.get(
    "/status",
    response_model=StatusResponse,
    status_code=status.HTTP_200_OK,
    summary="API status",
)
async def api_status(settings: SettingsDep) -> StatusResponse:
    return StatusResponse(
        status="ok",
        api=f"{settings.api_title} {settings.api_version}",
        time=iso_timestamp(datetime.now(timezone.utc)),
    )
