"""
Exception handlers shared by both applications.
"""

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Kept byte-for-byte, double space included; clients match on it.
NOT_FOUND_BODY = {"error": "Not Found -  Error 404."}


def install_global_exception_handler(app: FastAPI) -> None:
    """
    Catch-all exception handler.

    Logs the full error server-side and returns a generic 500 so stack
    traces never reach clients.
    """

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error."},
        )


def install_not_found_fallback(app: FastAPI) -> None:
    """
    Answer every unmatched route with the resource API's 404 body.

    A known path requested with the wrong method is treated the same way:
    there is no route for it, so it falls through to the 404.
    """

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            logger.info(
                "No route matched",
                extra={"path": request.url.path, "method": request.method}
            )
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=NOT_FOUND_BODY,
            )
        return await http_exception_handler(request, exc)
