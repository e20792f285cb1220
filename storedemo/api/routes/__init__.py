"""
API route modules.

- objects: upload and listing (upload service)
- status: root and status (resource API)
- health: liveness and readiness (both services)
"""
