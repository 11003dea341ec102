"""
Domain entities for the records bounded context.

Value objects that travel between the HTTP layer, the use cases and the
record store. They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

REQUIRED_CONTEXT_FIELDS = ("role", "user_id", "schema", "table")


class ResultShape(Enum):
    """How the database shapes the rows of a query into one JSON value."""

    JSON_ARRAY = "json_array"
    JSON_OBJECT = "json_object"
    ROW_COUNT = "row_count"


@dataclass(frozen=True)
class QueryContext:
    """Everything routing resolved about one API call.

    Attributes:
        role: Database role the statement runs as.
        user_id: Identifier of the acting user, visible to row-level policies.
        schema: Bundle schema addressed by the route.
        table: Table (or view) addressed by the route.
        record: Record identifier for single-record operations.
        filters: Ordered, multi-valued query string pairs for list requests.
    """

    role: Optional[str]
    user_id: Optional[str]
    schema: Optional[str]
    table: Optional[str]
    record: Optional[str] = None
    filters: tuple[tuple[str, str], ...] = ()

    def missing_fields(self, needs_record: bool = False) -> list[str]:
        """Return the names of required values that are absent or blank."""
        required = REQUIRED_CONTEXT_FIELDS + (("record",) if needs_record else ())
        return [name for name in required if not getattr(self, name)]


@dataclass(frozen=True)
class BuiltQuery:
    """A statement ready for execution, with its bound parameters.

    ``session_sql`` binds the acting role and user to the current
    transaction and must run immediately before ``sql`` on the same
    connection.
    """

    sql: str
    params: dict[str, Any]
    shape: ResultShape
    role: str
    user_id: str
    session_sql: str
    session_params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseError:
    """The sole error payload shape returned to API clients."""

    http_code: int
    db_code: str
    message: str
    schema: str
    table: str
    record: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "http_code": self.http_code,
            "db_code": self.db_code,
            "message": self.message,
            "schema": self.schema,
            "table": self.table,
            "record": self.record or "",
        }
