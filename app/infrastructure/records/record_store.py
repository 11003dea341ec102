"""
Adapter: Record store.

Implements the RecordStore port on a SQLAlchemy engine. Each statement
runs in its own short transaction: the acting role and user are bound
with transaction-local settings, then the statement itself runs, so
row-level policies see the caller and nothing leaks to the next checkout
of the pooled connection.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError

from app.domain.records.entities import BuiltQuery
from app.domain.records.errors import DatabaseError
from app.domain.records.ports import RecordStore
from app.infrastructure.db_errors import primary_message, sqlstate

logger = logging.getLogger(__name__)


class SqlAlchemyRecordStore(RecordStore):
    """Runs built record statements against PostgreSQL."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def fetch_json(self, query: BuiltQuery) -> Optional[str]:
        """Return the JSON text produced by ``query``, or None for no rows."""
        try:
            with self._engine.begin() as conn:
                self._bind_session(conn, query)
                row = conn.execute(text(query.sql), query.params).first()
        except DBAPIError as exc:
            raise self._translate(exc) from exc

        if row is None:
            return None
        return row[0]

    def execute(self, query: BuiltQuery) -> int:
        """Run ``query`` and return its affected row count."""
        try:
            with self._engine.begin() as conn:
                self._bind_session(conn, query)
                result = conn.execute(text(query.sql), query.params)
                return result.rowcount
        except DBAPIError as exc:
            raise self._translate(exc) from exc

    @staticmethod
    def _bind_session(conn: Connection, query: BuiltQuery) -> None:
        conn.execute(text(query.session_sql), query.session_params)

    @staticmethod
    def _translate(exc: DBAPIError) -> DatabaseError:
        code = sqlstate(exc)
        logger.warning("Statement failed with SQLSTATE %s", code or "<none>")
        return DatabaseError(code, primary_message(exc))
