"""
Use case: Delete a record.

Input: QueryContext (role, user_id, schema, table, record)
Output: None (the interface answers 204 No Content)
Side effects: One DELETE against the base table.
Failure cases: MissingContextError, RecordNotFoundError, DatabaseError.
"""

import logging

from app.application.records.context import query_errors_for, require_context
from app.domain.records.entities import QueryContext
from app.domain.records.errors import DatabaseError, RecordNotFoundError
from app.domain.records.ports import RecordStore
from app.domain.records.query_builder import DEFAULT_USER_ID_SETTING, QueryBuilder

logger = logging.getLogger(__name__)


class DeleteRecordUseCase:
    """Deletes one row of the base table; zero affected rows is a NotFound."""

    def __init__(
        self, store: RecordStore, user_id_setting: str = DEFAULT_USER_ID_SETTING
    ) -> None:
        self._store = store
        self._user_id_setting = user_id_setting

    def execute(self, context: QueryContext) -> None:
        require_context(context, needs_record=True)
        builder = (
            QueryBuilder(context.schema, context.table, self._user_id_setting)
            .with_record(context.record)
            .as_role(context.role)
            .as_user(context.user_id)
        )
        table = builder.write_table

        with query_errors_for(context.schema, table, context.record):
            query = builder.delete()

        try:
            affected = self._store.execute(query)
        except DatabaseError as exc:
            raise exc.with_context(context.schema, table, context.record) from exc

        if affected == 0:
            raise RecordNotFoundError(context.schema, table, context.record)
        logger.info("Deleted %s.%s id=%s", context.schema, table, context.record)
