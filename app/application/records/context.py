"""
Request context validation shared by the record use cases.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from app.domain.records.entities import QueryContext
from app.domain.records.errors import InvalidQueryError, MissingContextError

logger = logging.getLogger(__name__)


def require_context(context: QueryContext, needs_record: bool = False) -> None:
    """Fail fast when routing left a required context value unset.

    Raises:
        MissingContextError: If role, user id, schema, table (or record,
            when ``needs_record``) is absent.
    """
    missing = context.missing_fields(needs_record=needs_record)
    if missing:
        logger.warning("Request context is missing: %s", ", ".join(missing))
        raise MissingContextError(
            missing, context.schema or "", context.table or "", context.record
        )


@contextmanager
def query_errors_for(
    schema: str, table: str, record: Optional[str] = None
) -> Iterator[None]:
    """Attach the request's schema/table/record to query-building errors."""
    try:
        yield
    except InvalidQueryError as exc:
        raise exc.with_context(schema, table, record) from exc
