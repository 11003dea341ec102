"""
Use case: Update a record and return it as one JSON object.

Input: QueryContext (role, user_id, schema, table, record), raw request body
Output: JSON object text of the updated row
Side effects: One UPDATE against the base table.
Failure cases: MissingContextError, BodyDecodeError, EmptyBodyError,
    InvalidIdentifierError, RecordNotFoundError, DatabaseError.
"""

from typing import Optional

from app.application.records.context import query_errors_for, require_context
from app.application.records.request_body import decode_request_body
from app.domain.records.entities import QueryContext
from app.domain.records.errors import (
    DatabaseError,
    EmptyBodyError,
    RecordNotFoundError,
)
from app.domain.records.ports import RecordStore
from app.domain.records.query_builder import DEFAULT_USER_ID_SETTING, QueryBuilder


class UpdateRecordUseCase:
    """Updates the columns named in the body on one row of the base table."""

    def __init__(
        self, store: RecordStore, user_id_setting: str = DEFAULT_USER_ID_SETTING
    ) -> None:
        self._store = store
        self._user_id_setting = user_id_setting

    def execute(self, context: QueryContext, raw_body: Optional[bytes]) -> str:
        require_context(context, needs_record=True)
        builder = (
            QueryBuilder(context.schema, context.table, self._user_id_setting)
            .with_record(context.record)
            .json_object()
            .as_role(context.role)
            .as_user(context.user_id)
        )
        table = builder.write_table

        body = decode_request_body(raw_body, context.schema, table, context.record)
        if not body:
            raise EmptyBodyError(context.schema, table, context.record)

        with query_errors_for(context.schema, table, context.record):
            query = builder.update(body)

        try:
            payload = self._store.fetch_json(query)
        except DatabaseError as exc:
            raise exc.with_context(context.schema, table, context.record) from exc

        if payload is None:
            raise RecordNotFoundError(context.schema, table, context.record)
        return payload
