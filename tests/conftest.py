"""
Shared fixtures.

Every app built here runs in mock mode, so no test touches the network.
"""

import pytest
from fastapi.testclient import TestClient

from storedemo.config.settings import Settings
from storedemo.infrastructure.dynamodb.client import MockTableClient
from storedemo.infrastructure.storage.client import MockObjectStoreClient
from storedemo.main import create_app
from storedemo.resource_main import create_resource_app

PUBLIC_BASE_URL = "http://localhost:4566/uploads"


@pytest.fixture
def settings() -> Settings:
    """Mock-mode settings that ignore any local .env file."""
    return Settings(
        _env_file=None,
        storage_bucket_name="uploads",
        storage_public_base_url=PUBLIC_BASE_URL,
        storage_mock_mode=True,
        dynamodb_mock_mode=True,
    )


@pytest.fixture
def store() -> MockObjectStoreClient:
    return MockObjectStoreClient(bucket_name="uploads", public_base_url=PUBLIC_BASE_URL)


@pytest.fixture
def upload_client(settings, store):
    app = create_app(settings=settings, storage_client=store)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def resource_client(settings):
    app = create_resource_app(settings=settings, table_client=MockTableClient("resources"))
    with TestClient(app) as client:
        yield client
