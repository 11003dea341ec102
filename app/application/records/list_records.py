"""
Use case: List the rows of a bundle table as one JSON array.

Input: QueryContext (role, user_id, schema, table, filters)
Output: JSON array text
Side effects: None.
Failure cases: MissingContextError, InvalidFilterError, InvalidIdentifierError,
    DatabaseError.
"""

import logging

from app.application.records.context import query_errors_for, require_context
from app.domain.records.entities import QueryContext
from app.domain.records.errors import DatabaseError
from app.domain.records.ports import RecordStore
from app.domain.records.query_builder import DEFAULT_USER_ID_SETTING, QueryBuilder

logger = logging.getLogger(__name__)

EMPTY_JSON_ARRAY = "[]"


class ListRecordsUseCase:
    """Reads every matching row of a table, aggregated by the database.

    A table with no matching rows is an empty list, never a NotFound.
    """

    def __init__(
        self, store: RecordStore, user_id_setting: str = DEFAULT_USER_ID_SETTING
    ) -> None:
        self._store = store
        self._user_id_setting = user_id_setting

    def execute(self, context: QueryContext) -> str:
        require_context(context)
        with query_errors_for(context.schema, context.table):
            query = (
                QueryBuilder(context.schema, context.table, self._user_id_setting)
                .with_filters(context.filters)
                .json_array()
                .as_role(context.role)
                .as_user(context.user_id)
                .select()
            )

        try:
            payload = self._store.fetch_json(query)
        except DatabaseError as exc:
            raise exc.with_context(context.schema, context.table) from exc

        if payload is None:
            logger.debug("No rows in %s.%s", context.schema, context.table)
            return EMPTY_JSON_ARRAY
        return payload
