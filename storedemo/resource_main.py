"""
Resource API entry point.

A skeleton REST API in front of a DynamoDB table. It answers on /,
/status and the health endpoints; every other route gets the 404 body.

For local development:
    uvicorn storedemo.resource_main:app --reload --port 3000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import install_global_exception_handler, install_not_found_fallback
from .api.routes import health, status
from .config.settings import Settings, get_settings
from .infrastructure.dynamodb.client import TableClient, TableConfig, create_table_client

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def build_table_config(settings: Settings) -> TableConfig:
    return TableConfig(
        table_name=settings.dynamodb_table_name,
        endpoint_url=settings.dynamodb_endpoint,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        region=settings.storage_region,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    logger.info(
        "Resource API starting",
        extra={
            "version": settings.api_version,
            "table": settings.dynamodb_table_name,
            "mock_mode": settings.dynamodb_mock_mode,
        }
    )

    missing_fields = settings.validate_table_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Resource API shutting down")


def create_resource_app(
    settings: Optional[Settings] = None,
    table_client: Optional[TableClient] = None,
) -> FastAPI:
    """Application factory for the resource API."""
    settings = settings or get_settings()

    if table_client is None:
        table_client = create_table_client(
            config=build_table_config(settings),
            mock_mode=settings.dynamodb_mock_mode,
        )

    app = FastAPI(
        title=f"{settings.api_title} resource API",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.table_client = table_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        status.router,
        tags=["Status"],
    )

    install_not_found_fallback(app)
    install_global_exception_handler(app)

    return app


app = create_resource_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "storedemo.resource_main:app",
        host="0.0.0.0",
        port=settings.resource_port,
        log_level=settings.log_level.lower(),
    )
