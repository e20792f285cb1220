"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a local .env file)
with defaults that point at a LocalStack-style endpoint, so both services
start against a local fake AWS without any setup.

Settings are turned into explicit StorageConfig/TableConfig objects by
the app factories. Nothing below holds a live client.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    (e.g. STORAGE_BUCKET_NAME=my-bucket).
    """

    # API Configuration
    api_title: str = "storedemo"
    api_version: str = "v1"
    upload_port: int = Field(
        default=5000,
        description="Port the upload service listens on when run directly"
    )
    resource_port: int = Field(
        default=3000,
        description="Port the resource API listens on when run directly"
    )

    # Object storage (S3-compatible)
    storage_endpoint_url: str = Field(
        default="http://localhost:4566",
        description="S3-compatible endpoint URL (LocalStack, MinIO, AWS)"
    )
    storage_region: str = Field(
        default="us-east-1",
        description="Region name passed to the S3 client"
    )
    storage_access_key_id: str = Field(
        default="test",
        description="Access key ID for the object store"
    )
    storage_secret_access_key: str = Field(
        default="test",
        description="Secret access key for the object store"
    )
    storage_bucket_name: str = Field(
        default="uploads",
        description="Bucket that receives uploaded images"
    )
    storage_public_base_url: Optional[str] = Field(
        default=None,
        description="Base URL used to build object Source links. Defaults to {endpoint}/{bucket}."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory object store instead of a real endpoint"
    )

    # Error reporting
    errors_as_200: bool = Field(
        default=False,
        description="Return store errors with status 200, like the original service did"
    )

    # DynamoDB (resource API)
    dynamodb_table_name: str = Field(
        default="resources",
        description="Table fronted by the resource API"
    )
    dynamodb_endpoint_url: Optional[str] = Field(
        default=None,
        description="DynamoDB endpoint URL. Falls back to the storage endpoint."
    )
    dynamodb_mock_mode: bool = Field(
        default=False,
        description="Skip real DynamoDB calls in readiness checks"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def storage_public_base(self) -> str:
        """
        Base URL that object keys are appended to in listings.

        Path-style addressing: {endpoint}/{bucket}. Trailing slashes are
        stripped so callers can always join with a single "/".
        """
        if self.storage_public_base_url:
            return self.storage_public_base_url.rstrip("/")
        return f"{self.storage_endpoint_url.rstrip('/')}/{self.storage_bucket_name}"

    @property
    def dynamodb_endpoint(self) -> str:
        return self.dynamodb_endpoint_url or self.storage_endpoint_url

    def validate_storage_fields(self) -> list[str]:
        """
        Fields the upload service needs, given the storage mock flag.

        Returns list of missing required fields.
        """
        if self.storage_mock_mode:
            return []

        missing = []
        if not self.storage_endpoint_url:
            missing.append("STORAGE_ENDPOINT_URL")
        if not self.storage_bucket_name:
            missing.append("STORAGE_BUCKET_NAME")
        if not self.storage_access_key_id:
            missing.append("STORAGE_ACCESS_KEY_ID")
        if not self.storage_secret_access_key:
            missing.append("STORAGE_SECRET_ACCESS_KEY")
        return missing

    def validate_table_fields(self) -> list[str]:
        """Fields the resource API needs, given the DynamoDB mock flag."""
        if not self.dynamodb_mock_mode and not self.dynamodb_table_name:
            return ["DYNAMODB_TABLE_NAME"]
        return []


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() or pass a Settings to the app factory.
    """
    return Settings()
