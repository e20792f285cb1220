"""
HTTP tests for the upload service.

The app is built in mock mode with an in-memory store (see conftest.py),
or with a failing store to check how errors reach the caller.
"""

import re

import pytest
from fastapi.testclient import TestClient

from storedemo.infrastructure.storage.client import StoreRejected, StoreUnavailable
from storedemo.main import create_app

PUBLIC_BASE_URL = "http://localhost:4566/uploads"

KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z-(?P<filename>.+)$")


class FailingStore:
    """Store whose every call fails with the given error."""

    bucket_name = "uploads"

    def __init__(self, error):
        self._error = error

    async def upload(self, data, key, content_type=None):
        raise self._error

    async def list_objects(self):
        raise self._error

    async def ping(self):
        raise self._error


def unreachable() -> StoreUnavailable:
    return StoreUnavailable(
        code="EndpointConnectionError",
        message='Could not connect to the endpoint URL: "http://localhost:4566/uploads"',
    )


def upload(client: TestClient, filename: str, data: bytes = b"image-bytes"):
    return client.post("/", files={"image": (filename, data, "image/png")})


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

class TestUpload:
    """Tests for POST /."""

    def test_upload_returns_descriptor(self, upload_client):
        response = upload(upload_client, "cat.png")

        assert response.status_code == 200
        body = response.json()
        assert body["Bucket"] == "uploads"
        assert body["ETag"].startswith('"')
        assert body["Location"].startswith(f"{PUBLIC_BASE_URL}/")

    def test_key_is_timestamp_dash_filename(self, upload_client):
        response = upload(upload_client, "cat.png")

        match = KEY_PATTERN.match(response.json()["Key"])
        assert match is not None
        assert match.group("filename") == "cat.png"

    def test_uploaded_file_appears_in_listing(self, upload_client):
        upload(upload_client, "holiday photo.jpeg")

        listing = upload_client.get("/").json()

        assert any(entry["Key"].endswith("holiday photo.jpeg") for entry in listing)

    def test_missing_image_field_is_rejected(self, upload_client):
        response = upload_client.post("/", files={"other": ("a.png", b"x", "image/png")})
        assert response.status_code == 422

    def test_image_sent_as_plain_field_is_rejected(self, upload_client):
        """A form value without a filename is not a file upload."""
        response = upload_client.post("/", data={"image": "not-a-file"})
        assert response.status_code == 422

    def test_no_file_type_validation(self, upload_client):
        """Any content type is accepted and stored."""
        response = upload_client.post("/", files={"image": ("notes.txt", b"text", "text/plain")})
        assert response.status_code == 200


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListing:
    """Tests for GET /."""

    def test_empty_bucket_lists_nothing(self, upload_client):
        response = upload_client.get("/")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_one_entry_per_object(self, upload_client):
        for name in ["a.png", "b.png", "c.png"]:
            upload(upload_client, name)

        listing = upload_client.get("/").json()

        assert len(listing) == 3

    def test_entries_have_public_shape(self, upload_client):
        upload(upload_client, "a.png", data=b"12345")

        entry = upload_client.get("/").json()[0]

        assert set(entry) == {"Key", "Source", "LastModified", "ETag", "Size", "StorageClass", "Owner"}
        assert set(entry["Owner"]) == {"DisplayName", "ID"}
        assert entry["Size"] == 5
        assert entry["StorageClass"] == "STANDARD"

    def test_source_is_encoded_base_url_plus_key(self, upload_client):
        """Colons in the timestamp and spaces in the filename are escaped."""
        upload(upload_client, "my cat.png")

        entry = upload_client.get("/").json()[0]
        encoded_key = entry["Key"].replace(":", "%3A").replace(" ", "%20")

        assert entry["Source"] == f"{PUBLIC_BASE_URL}/{encoded_key}"
        assert entry["Source"].endswith("-my%20cat.png")

    def test_listing_twice_returns_same_entries(self, upload_client):
        upload(upload_client, "a.png")
        upload(upload_client, "b.png")

        first = upload_client.get("/").json()
        second = upload_client.get("/").json()

        assert first == second


# ---------------------------------------------------------------------------
# Store Errors
# ---------------------------------------------------------------------------

class TestStoreErrors:
    """Store errors are forwarded verbatim in the body."""

    @pytest.fixture
    def failing_client(self, settings):
        app = create_app(settings=settings, storage_client=FailingStore(unreachable()))
        with TestClient(app) as client:
            yield client

    def test_unreachable_store_on_upload(self, failing_client):
        response = upload(failing_client, "cat.png")

        assert response.status_code == 503
        assert response.json() == {
            "Error": {
                "Code": "EndpointConnectionError",
                "Message": 'Could not connect to the endpoint URL: "http://localhost:4566/uploads"',
            },
            "StatusCode": None,
        }

    def test_unreachable_store_on_listing(self, failing_client):
        response = failing_client.get("/")

        assert response.status_code == 503
        assert response.json()["Error"]["Code"] == "EndpointConnectionError"

    def test_rejected_request_returns_bad_gateway(self, settings):
        error = StoreRejected(code="NoSuchBucket", message="The specified bucket does not exist", status_code=404)
        app = create_app(settings=settings, storage_client=FailingStore(error))

        with TestClient(app) as client:
            response = client.get("/")

        assert response.status_code == 502
        assert response.json()["Error"] == {
            "Code": "NoSuchBucket",
            "Message": "The specified bucket does not exist",
        }
        assert response.json()["StatusCode"] == 404

    def test_errors_as_200_keeps_original_status(self, settings):
        """With ERRORS_AS_200 set, failures come back as 200 with the error body."""
        legacy = settings.model_copy(update={"errors_as_200": True})
        app = create_app(settings=legacy, storage_client=FailingStore(unreachable()))

        with TestClient(app) as client:
            upload_response = upload(client, "cat.png")
            list_response = client.get("/")

        assert upload_response.status_code == 200
        assert upload_response.json()["Error"]["Code"] == "EndpointConnectionError"
        assert list_response.status_code == 200
        assert list_response.json()["Error"]["Code"] == "EndpointConnectionError"


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class TestHealth:
    def test_liveness(self, upload_client):
        response = upload_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["details"]["mock_mode"]["storage"] is True

    def test_ready_with_mock_store(self, upload_client):
        response = upload_client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert {check["name"] for check in body["checks"]} == {"configuration", "storage"}

    def test_not_ready_when_store_unreachable(self, settings):
        app = create_app(settings=settings, storage_client=FailingStore(unreachable()))

        with TestClient(app) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        storage_check = next(c for c in body["checks"] if c["name"] == "storage")
        assert storage_check["status"] == "error"

    def test_ready_ignores_table_settings(self, settings, store):
        """The upload service never uses DynamoDB, so its settings don't matter here."""
        no_table = settings.model_copy(update={"dynamodb_mock_mode": False, "dynamodb_table_name": ""})
        app = create_app(settings=no_table, storage_client=store)

        with TestClient(app) as client:
            ready = client.get("/health/ready")
            live = client.get("/health")

        assert ready.status_code == 200
        assert ready.json()["status"] == "ready"
        assert live.json()["details"]["mock_mode"] == {"storage": True}

    def test_not_ready_when_storage_settings_missing(self, settings, store):
        no_bucket = settings.model_copy(update={"storage_mock_mode": False, "storage_bucket_name": ""})
        app = create_app(settings=no_bucket, storage_client=store)

        with TestClient(app) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        config_check = next(c for c in response.json()["checks"] if c["name"] == "configuration")
        assert config_check["error"] == "Missing required fields: STORAGE_BUCKET_NAME"
