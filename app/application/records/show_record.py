"""
Use case: Show a single record as one JSON object.

Input: QueryContext (role, user_id, schema, table, record)
Output: JSON object text
Side effects: None.
Failure cases: MissingContextError, RecordNotFoundError, DatabaseError.
"""

from app.application.records.context import query_errors_for, require_context
from app.domain.records.entities import QueryContext
from app.domain.records.errors import DatabaseError, RecordNotFoundError
from app.domain.records.ports import RecordStore
from app.domain.records.query_builder import DEFAULT_USER_ID_SETTING, QueryBuilder


class ShowRecordUseCase:
    """Reads exactly one row by its identifier."""

    def __init__(
        self, store: RecordStore, user_id_setting: str = DEFAULT_USER_ID_SETTING
    ) -> None:
        self._store = store
        self._user_id_setting = user_id_setting

    def execute(self, context: QueryContext) -> str:
        require_context(context, needs_record=True)
        with query_errors_for(context.schema, context.table, context.record):
            query = (
                QueryBuilder(context.schema, context.table, self._user_id_setting)
                .with_record(context.record)
                .json_object()
                .as_role(context.role)
                .as_user(context.user_id)
                .select()
            )

        try:
            payload = self._store.fetch_json(query)
        except DatabaseError as exc:
            raise exc.with_context(context.schema, context.table, context.record) from exc

        if payload is None:
            raise RecordNotFoundError(context.schema, context.table, context.record)
        return payload
