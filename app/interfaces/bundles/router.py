"""
FastAPI router for bundle administration.

Read-only: installation happens through the command line.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.application.bundles.aggregate_admin_panel import AggregateAdminPanelUseCase
from app.interfaces.bundles.dependencies import get_aggregate_admin_panel_use_case
from app.interfaces.schemas import ServiceErrorResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/{panel}",
    responses={400: {"model": ServiceErrorResponse}},
    summary="Aggregate an admin panel",
    description=(
        "Combine admin-panel/<panel>.json of every installed bundle into one "
        "object keyed by bundle name."
    ),
)
def get_admin_panel(
    panel: str,
    use_case: AggregateAdminPanelUseCase = Depends(get_aggregate_admin_panel_use_case),
) -> JSONResponse:
    """Return the combined panel fragments."""
    return JSONResponse(content=use_case.execute(panel))
