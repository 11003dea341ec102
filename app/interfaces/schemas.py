"""
Pydantic response schemas shared by every router.

Record payloads are returned as raw JSON produced by the database, so the
only modelled responses are health checks and errors.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error payload returned by the records API."""

    model_config = ConfigDict(populate_by_name=True)

    http_code: int
    db_code: str = ""
    message: str
    schema_name: str = Field(default="", alias="schema")
    table: str = ""
    record: str = ""


class ServiceErrorResponse(BaseModel):
    """Error payload for non-record failures."""

    error: str
    detail: str | None = None
