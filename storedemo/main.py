"""
Upload service entry point.

Creates the FastAPI application that stores uploaded images in an
S3-compatible bucket and lists what is there.

For local development:
    uvicorn storedemo.main:app --reload --port 5000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import install_global_exception_handler
from .api.routes import health, objects
from .config.settings import Settings, get_settings
from .infrastructure.storage.client import (
    ObjectStoreClient,
    StorageConfig,
    create_storage_client,
)

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def build_storage_config(settings: Settings) -> StorageConfig:
    return StorageConfig(
        endpoint_url=settings.storage_endpoint_url,
        bucket_name=settings.storage_bucket_name,
        public_base_url=settings.storage_public_base,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        region=settings.storage_region,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    settings: Settings = app.state.settings

    logger.info(
        "Upload service starting",
        extra={
            "version": settings.api_version,
            "bucket": settings.storage_bucket_name,
            "mock_mode": settings.storage_mock_mode,
        }
    )

    missing_fields = settings.validate_storage_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Upload service shutting down")


def create_app(
    settings: Optional[Settings] = None,
    storage_client: Optional[ObjectStoreClient] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Configuration to use; defaults to the cached environment settings
        storage_client: Pre-built store client; built from settings when omitted
    """
    settings = settings or get_settings()

    if storage_client is None:
        storage_client = create_storage_client(
            config=build_storage_config(settings),
            mock_mode=settings.storage_mock_mode,
        )

    app = FastAPI(
        title=f"{settings.api_title} upload service",
        version=settings.api_version,
        description="""
        Upload images to an S3-compatible bucket and list stored objects.

        - `POST /` with a multipart `image` field stores the file under
          `{timestamp}-{filename}`
        - `GET /` lists stored objects with a public `Source` URL
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage_client = storage_client

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
        objects.router,
        tags=["Objects"],
    )

    install_global_exception_handler(app)

    logger.info(
        "FastAPI application created",
        extra={
            "title": app.title,
            "version": settings.api_version,
        }
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "storedemo.main:app",
        host="0.0.0.0",
        port=settings.upload_port,
        log_level=settings.log_level.lower(),
    )
