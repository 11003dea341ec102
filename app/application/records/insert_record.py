"""
Use case: Insert a record and return it as one JSON object.

Input: QueryContext (role, user_id, schema, table), raw request body
Output: JSON object text of the inserted row
Side effects: One INSERT against the base table.
Failure cases: MissingContextError, BodyDecodeError, InvalidIdentifierError,
    RecordNotFoundError, DatabaseError.
"""

import logging
from typing import Optional

from app.application.records.context import query_errors_for, require_context
from app.application.records.request_body import decode_request_body
from app.domain.records.entities import QueryContext
from app.domain.records.errors import DatabaseError, RecordNotFoundError
from app.domain.records.ports import RecordStore
from app.domain.records.query_builder import DEFAULT_USER_ID_SETTING, QueryBuilder

logger = logging.getLogger(__name__)


class InsertRecordUseCase:
    """Inserts one row into the base table behind the requested table.

    Without usable column data the row is built from column defaults.
    """

    def __init__(
        self, store: RecordStore, user_id_setting: str = DEFAULT_USER_ID_SETTING
    ) -> None:
        self._store = store
        self._user_id_setting = user_id_setting

    def execute(self, context: QueryContext, raw_body: Optional[bytes]) -> str:
        require_context(context)
        builder = (
            QueryBuilder(context.schema, context.table, self._user_id_setting)
            .json_object()
            .as_role(context.role)
            .as_user(context.user_id)
        )
        table = builder.write_table

        body = decode_request_body(raw_body, context.schema, table)
        if not body:
            logger.debug("Inserting defaults into %s.%s", context.schema, table)
        with query_errors_for(context.schema, table):
            query = builder.insert(body)

        try:
            payload = self._store.fetch_json(query)
        except DatabaseError as exc:
            raise exc.with_context(context.schema, table) from exc

        # A row-level policy can hide the row we just wrote.
        if payload is None:
            raise RecordNotFoundError(context.schema, table, None)
        return payload
