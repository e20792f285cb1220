"""
DynamoDB table client for the resource API.

The resource API is a skeleton: it has no item routes yet, so the only
thing this client does is describe the configured table for readiness
checks. Mock mode reports a fixed ACTIVE table.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class TableError(Exception):
    """Raised when the table cannot be described."""
    pass


@dataclass
class TableConfig:
    """Configuration for a DynamoDB (or DynamoDB-compatible) table."""
    table_name: str
    endpoint_url: Optional[str] = None
    access_key_id: str = "test"
    secret_access_key: str = "test"
    region: str = "us-east-1"


class TableClient(Protocol):
    """Protocol for table operations used by the resource API."""

    async def describe(self) -> dict[str, Any]:
        """Return table name and status, or raise TableError."""
        ...


class DynamoTableClient:
    """DynamoDB client backed by boto3."""

    def __init__(self, config: TableConfig, dynamodb_client: Any = None) -> None:
        self._config = config

        if dynamodb_client is None:
            dynamodb_client = boto3.client(
                "dynamodb",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                region_name=config.region,
            )

        self._client = dynamodb_client

        logger.info(
            "Initialized DynamoDB table client",
            extra={
                "table": config.table_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def describe(self) -> dict[str, Any]:
        try:
            response = await run_in_threadpool(
                self._client.describe_table,
                TableName=self._config.table_name,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to describe table",
                extra={"table": self._config.table_name, "error": str(e)}
            )
            raise TableError(f"Describe table failed: {e}") from e

        table = response.get("Table", {})
        return {
            "name": table.get("TableName", self._config.table_name),
            "status": table.get("TableStatus", "UNKNOWN"),
        }


class MockTableClient:
    """Stand-in table that always reports ACTIVE."""

    def __init__(self, table_name: str = "resources") -> None:
        self._table_name = table_name
        logger.info("Initialized mock table client")

    async def describe(self) -> dict[str, Any]:
        return {"name": self._table_name, "status": "ACTIVE"}


def create_table_client(
    config: Optional[TableConfig] = None,
    mock_mode: bool = False,
) -> TableClient:
    """Create a table client; mock when mock_mode is set."""
    if mock_mode:
        return MockTableClient(config.table_name if config else "resources")

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return DynamoTableClient(config)
