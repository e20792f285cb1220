"""
Health check endpoints, shared by both services.

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we serve traffic?)

Readiness checks whichever backends the application was built with: the
object store for the upload service, the table for the resource API.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ... import __version__
from ...infrastructure.dynamodb.client import TableError
from ...infrastructure.storage.client import StorageError
from ..dependencies import SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: Optional[str] = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(request: Request, settings: SettingsDep) -> HealthResponse:
    """
    Liveness check - is the process alive?

    Fast, and never touches external dependencies. Mock flags are reported
    only for the backends this application was built with.
    """
    mock_mode: dict[str, bool] = {}
    if getattr(request.app.state, "storage_client", None) is not None:
        mock_mode["storage"] = settings.storage_mock_mode
    if getattr(request.app.state, "table_client", None) is not None:
        mock_mode["dynamodb"] = settings.dynamodb_mock_mode

    return HealthResponse(
        status="ok",
        version=__version__,
        details={"mock_mode": mock_mode},
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Checks external dependencies.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(request: Request, settings: SettingsDep) -> Any:
    """
    Readiness check - can we serve traffic?

    Returns 503 if any check fails.
    """
    checks: list[ReadinessCheck] = []

    storage = getattr(request.app.state, "storage_client", None)
    table = getattr(request.app.state, "table_client", None)

    missing_fields: list[str] = []
    if storage is not None:
        missing_fields.extend(settings.validate_storage_fields())
    if table is not None:
        missing_fields.extend(settings.validate_table_fields())

    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Missing required fields: {', '.join(missing_fields)}"
        ))
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    if storage is not None:
        try:
            await storage.ping()
            checks.append(ReadinessCheck(name="storage", status="ok"))
        except StorageError as e:
            checks.append(ReadinessCheck(name="storage", status="error", error=str(e)))

    if table is not None:
        try:
            description = await table.describe()
            if description["status"] == "ACTIVE":
                checks.append(ReadinessCheck(name="dynamodb", status="ok"))
            else:
                checks.append(ReadinessCheck(
                    name="dynamodb",
                    status="error",
                    error=f"Table status is {description['status']}"
                ))
        except TableError as e:
            checks.append(ReadinessCheck(name="dynamodb", status="error", error=str(e)))

    all_ok = all(check.status == "ok" for check in checks)

    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )

    if all_ok:
        return response

    logger.warning(
        "Readiness check failed",
        extra={
            "checks": [
                {"name": c.name, "status": c.status, "error": c.error}
                for c in checks
            ]
        }
    )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(),
    )
