"""
storedemo - two small HTTP services in front of AWS-style storage.

This package contains:
- core: Framework-agnostic object models and key naming
- infrastructure: Object store (S3) and table (DynamoDB) integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
