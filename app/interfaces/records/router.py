"""
FastAPI router for the records bounded context.

Every route delegates to one use case and returns the database-shaped
JSON text untouched. Error mapping is handled by centralized error
handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.application.records.delete_record import DeleteRecordUseCase
from app.application.records.insert_record import InsertRecordUseCase
from app.application.records.list_records import ListRecordsUseCase
from app.application.records.show_record import ShowRecordUseCase
from app.application.records.update_record import UpdateRecordUseCase
from app.domain.records.entities import QueryContext
from app.interfaces.records.dependencies import (
    get_delete_record_use_case,
    get_insert_record_use_case,
    get_list_records_use_case,
    get_query_context,
    get_record_context,
    get_show_record_use_case,
    get_update_record_use_case,
    read_body,
)
from app.interfaces.schemas import ErrorResponse

router = APIRouter(prefix="/records/{schema}/{table}", tags=["records"])

JSON_MEDIA_TYPE = "application/json"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _json(payload: str, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(content=payload, media_type=JSON_MEDIA_TYPE, status_code=status_code)


@router.get(
    "",
    responses=ERROR_RESPONSES,
    summary="List records",
    description=(
        "Return every visible row as a JSON array. Query parameters filter "
        "the list: col=op.value with eq, neq, gt, gte, lt, lte, like, ilike "
        "or is; select, order, limit and offset are reserved."
    ),
)
def list_records(
    context: QueryContext = Depends(get_query_context),
    use_case: ListRecordsUseCase = Depends(get_list_records_use_case),
) -> Response:
    """List the rows of a table."""
    return _json(use_case.execute(context))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Insert a record",
    description="Insert one row and return it. An empty body inserts column defaults.",
)
def insert_record(
    context: QueryContext = Depends(get_query_context),
    raw_body: Optional[bytes] = Depends(read_body),
    use_case: InsertRecordUseCase = Depends(get_insert_record_use_case),
) -> Response:
    """Insert a row into the base table."""
    return _json(use_case.execute(context, raw_body), status.HTTP_201_CREATED)


@router.get(
    "/{record}",
    responses=ERROR_RESPONSES,
    summary="Show a record",
)
def show_record(
    context: QueryContext = Depends(get_record_context),
    use_case: ShowRecordUseCase = Depends(get_show_record_use_case),
) -> Response:
    """Return one row as a JSON object."""
    return _json(use_case.execute(context))


@router.api_route(
    "/{record}",
    methods=["PATCH", "PUT"],
    responses=ERROR_RESPONSES,
    summary="Update a record",
    description="Set the given columns on one row and return the row.",
)
def update_record(
    context: QueryContext = Depends(get_record_context),
    raw_body: Optional[bytes] = Depends(read_body),
    use_case: UpdateRecordUseCase = Depends(get_update_record_use_case),
) -> Response:
    """Update one row of the base table."""
    return _json(use_case.execute(context, raw_body))


@router.delete(
    "/{record}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    summary="Delete a record",
)
def delete_record(
    context: QueryContext = Depends(get_record_context),
    use_case: DeleteRecordUseCase = Depends(get_delete_record_use_case),
) -> Response:
    """Delete one row of the base table."""
    use_case.execute(context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
