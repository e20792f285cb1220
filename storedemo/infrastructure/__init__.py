"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- storage: Object storage (S3-compatible)
- dynamodb: Table behind the resource API

These wrappers translate between SDK formats and our domain models.
"""
