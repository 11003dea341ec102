"""
Health check router.

Provides a liveness endpoint and a readiness endpoint that round-trips
the request-serving database connection.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.infrastructure.database import get_engine
from app.interfaces.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)


@router.get(
    "/health/db",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
    summary="Database readiness",
    description="Runs a trivial query on the request-serving connection pool.",
)
def database_health():
    """Report whether the database answers."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", type(exc).__name__)
        body = HealthResponse(status="unavailable", version=settings.version)
        return JSONResponse(status_code=503, content=body.model_dump())
    return HealthResponse(status="ok", version=settings.version)
