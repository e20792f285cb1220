"""
DynamoDB integration for the resource API.

Only table reachability is implemented; item access belongs to whatever
business routes get added on top.
"""

from .client import (
    DynamoTableClient,
    MockTableClient,
    TableClient,
    TableConfig,
    TableError,
    create_table_client,
)

__all__ = [
    "DynamoTableClient",
    "MockTableClient",
    "TableClient",
    "TableConfig",
    "TableError",
    "create_table_client",
]
