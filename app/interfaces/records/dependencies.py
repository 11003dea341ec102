"""
Dependency injection for the records bounded context.

Builds use cases around the shared SQLAlchemy engine and turns the
incoming request into a QueryContext: path parameters name the schema,
table and record, headers name the caller, the query string carries
list filters.
"""

import dataclasses
from typing import Optional

from fastapi import Depends, Header, Request

from app.application.records.delete_record import DeleteRecordUseCase
from app.application.records.insert_record import InsertRecordUseCase
from app.application.records.list_records import ListRecordsUseCase
from app.application.records.show_record import ShowRecordUseCase
from app.application.records.update_record import UpdateRecordUseCase
from app.core.config import settings
from app.domain.records.entities import QueryContext
from app.domain.records.ports import RecordStore
from app.infrastructure.database import get_engine
from app.infrastructure.records.record_store import SqlAlchemyRecordStore


def get_record_store() -> RecordStore:
    """Build the record store on the shared engine."""
    return SqlAlchemyRecordStore(engine=get_engine())


def get_list_records_use_case(
    store: RecordStore = Depends(get_record_store),
) -> ListRecordsUseCase:
    return ListRecordsUseCase(store=store, user_id_setting=settings.user_id_setting)


def get_show_record_use_case(
    store: RecordStore = Depends(get_record_store),
) -> ShowRecordUseCase:
    return ShowRecordUseCase(store=store, user_id_setting=settings.user_id_setting)


def get_insert_record_use_case(
    store: RecordStore = Depends(get_record_store),
) -> InsertRecordUseCase:
    return InsertRecordUseCase(store=store, user_id_setting=settings.user_id_setting)


def get_update_record_use_case(
    store: RecordStore = Depends(get_record_store),
) -> UpdateRecordUseCase:
    return UpdateRecordUseCase(store=store, user_id_setting=settings.user_id_setting)


def get_delete_record_use_case(
    store: RecordStore = Depends(get_record_store),
) -> DeleteRecordUseCase:
    return DeleteRecordUseCase(store=store, user_id_setting=settings.user_id_setting)


def resolve_role(permission_level: Optional[str]) -> Optional[str]:
    """Map a caller permission level to a database role.

    Unknown or absent levels resolve to None.
    """
    if not permission_level:
        return None
    return settings.role_map.get(permission_level.strip().lower())


def get_query_context(
    request: Request,
    schema: str,
    table: str,
    x_permission_level: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> QueryContext:
    """Build the context of a table-level request."""
    return QueryContext(
        role=resolve_role(x_permission_level),
        user_id=x_user_id,
        schema=schema,
        table=table,
        filters=tuple(request.query_params.multi_items()),
    )


def get_record_context(
    record: str,
    context: QueryContext = Depends(get_query_context),
) -> QueryContext:
    """Build the context of a single-record request."""
    return dataclasses.replace(context, record=record, filters=())


async def read_body(request: Request) -> Optional[bytes]:
    """Return the raw request body, None when the request has none."""
    body = await request.body()
    return body or None
