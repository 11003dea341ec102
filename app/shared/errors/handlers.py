"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
Records errors are rendered as a ResponseError carrying the schema, table
and record they concern plus the database error code; everything else uses
the ServiceErrorResponse shape. No stack traces or internal details are
exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.bundles.errors import (
    BundleError,
    BundleRegistryError,
    InvalidPanelNameError,
)
from app.domain.records.errors import DatabaseError, RecordsError

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RecordsError)
    async def handle_records_error(_request: Request, exc: RecordsError) -> JSONResponse:
        """Render a records failure with its translated status."""
        payload = exc.to_response()
        if isinstance(exc, DatabaseError) and payload.http_code >= HTTP_500:
            logger.error(
                "Database error %s on %s.%s: %s", exc.db_code, exc.schema, exc.table, exc.message
            )
        else:
            logger.warning(
                "%s on %s.%s: %s", type(exc).__name__, exc.schema, exc.table, exc.message
            )
        return JSONResponse(status_code=payload.http_code, content=payload.to_dict())

    @app.exception_handler(InvalidPanelNameError)
    async def handle_invalid_panel(
        _request: Request, exc: InvalidPanelNameError
    ) -> JSONResponse:
        """Handle malformed admin panel names."""
        logger.warning("Invalid panel name: %s", exc.panel)
        return _error_response(HTTP_400, "Invalid panel name")

    @app.exception_handler(BundleRegistryError)
    async def handle_registry(_request: Request, exc: BundleRegistryError) -> JSONResponse:
        """Handle an unreadable installed-bundles registry."""
        logger.error("Bundle registry error: %s", exc.message)
        return _error_response(HTTP_500, "Bundle registry unavailable")

    @app.exception_handler(BundleError)
    async def handle_bundle_error(_request: Request, exc: BundleError) -> JSONResponse:
        """Catch-all for unhandled bundle errors."""
        logger.error("Unhandled bundle error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
