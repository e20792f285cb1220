"""
HTTP layer: FastAPI routes, dependencies and error handlers.
"""
