"""
FastAPI dependency injection.

Clients are built once by the app factory and parked on app.state; the
dependencies below hand them to route handlers. Tests either build an app
with their own Settings or use app.dependency_overrides.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..infrastructure.dynamodb.client import TableClient
from ..infrastructure.storage.client import ObjectStoreClient

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_storage_client(request: Request) -> ObjectStoreClient:
    """
    Provide the object store client for uploads and listings.

    In mock mode this is the same in-memory client for every request, so
    uploaded objects show up in later listings.
    """
    return request.app.state.storage_client


def get_table_client(request: Request) -> TableClient:
    """Provide the DynamoDB table client for the resource API."""
    return request.app.state.table_client


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StorageClientDep = Annotated[ObjectStoreClient, Depends(get_storage_client)]
TableClientDep = Annotated[TableClient, Depends(get_table_client)]
