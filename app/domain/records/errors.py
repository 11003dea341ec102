"""
Domain-specific errors for the records bounded context.

Every request-level failure is one of these. Each error knows its HTTP
status and the schema/table/record it concerns so the interface layer can
render a ResponseError without inspecting anything else.
No framework imports allowed.
"""

from typing import Optional

from app.domain.records.entities import ResponseError
from app.domain.records.error_codes import http_status_for

HTTP_400 = 400
HTTP_404 = 404


class RecordsError(Exception):
    """Base error for all records domain errors."""

    http_status = 500

    def __init__(
        self,
        message: str,
        schema: str = "",
        table: str = "",
        record: Optional[str] = None,
        db_code: str = "",
    ) -> None:
        self.message = message
        self.schema = schema
        self.table = table
        self.record = record
        self.db_code = db_code
        super().__init__(self.message)

    def to_response(self) -> ResponseError:
        """Return the client-facing payload for this error."""
        return ResponseError(
            http_code=self.http_status,
            db_code=self.db_code,
            message=self.message,
            schema=self.schema,
            table=self.table,
            record=self.record,
        )


class MissingContextError(RecordsError):
    """Raised when routing did not supply a required context value.

    This is a wiring defect, not a data error: it never carries a database
    code, only whatever schema/table/record routing did resolve.
    """

    http_status = HTTP_400

    def __init__(
        self,
        missing: list[str],
        schema: str = "",
        table: str = "",
        record: Optional[str] = None,
    ) -> None:
        super().__init__("Missing required values on context", schema, table, record)
        self.missing = missing


class BodyDecodeError(RecordsError):
    """Raised when a request body is present but is not a JSON object."""

    http_status = HTTP_400


class EmptyBodyError(RecordsError):
    """Raised when an update carries no usable column data."""

    http_status = HTTP_400

    def __init__(self, schema: str, table: str, record: Optional[str]) -> None:
        super().__init__("Invalid or absent request body", schema, table, record)


class InvalidQueryError(RecordsError):
    """Base for statement-shape errors raised while building a query.

    The builder knows nothing about the request, so the use case attaches
    schema/table/record with ``with_context``.
    """

    http_status = HTTP_400

    def with_context(
        self, schema: str, table: str, record: Optional[str] = None
    ) -> "InvalidQueryError":
        """Return a copy carrying the request's schema/table/record."""
        return type(self)(self.message, schema, table, record)


class InvalidFilterError(InvalidQueryError):
    """Raised when a list filter in the query string cannot be parsed."""


class InvalidIdentifierError(InvalidQueryError):
    """Raised when a schema, table or column name is not a plain identifier."""


class RecordNotFoundError(RecordsError):
    """Raised when no row matches the record predicate."""

    http_status = HTTP_404

    def __init__(self, schema: str, table: str, record: Optional[str]) -> None:
        super().__init__("No record with that id", schema, table, record)


class DatabaseError(RecordsError):
    """Raised when the database rejects a statement.

    The HTTP status is derived solely from the SQLSTATE code.
    """

    def __init__(
        self,
        db_code: str,
        message: str,
        schema: str = "",
        table: str = "",
        record: Optional[str] = None,
    ) -> None:
        super().__init__(message, schema, table, record, db_code=db_code or "")

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return http_status_for(self.db_code)

    def with_context(
        self, schema: str, table: str, record: Optional[str] = None
    ) -> "DatabaseError":
        """Return a copy carrying the request's schema/table/record."""
        return DatabaseError(self.db_code, self.message, schema, table, record)
