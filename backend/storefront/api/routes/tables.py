"""Admin Tables Routes — paged listing, CRUD and CSV export for registry tables.

Invariants:
    - Listing is public; create/update/delete/export require the store owner
    - page/limit/sort/search are reserved query params; every other param is a
      column filter (validated against the table by the repository)
    - Export responds text/csv with attachment filename "<table>.csv"

Design Decisions:
    - One generic router for every table: the registry decides what exists
    - Row ids are integers in the path (FastAPI rejects anything else with 400)
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import Response

from storefront.api.deps import get_table_repository, require_admin
from storefront.core.errors import ErrorContext, InvalidQueryError
from storefront.core.table_query import DEFAULT_PAGE_SIZE
from storefront.schemas.tables import DeleteResponse, TablePageResponse
from storefront.services.table_repository import TableRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/tables", tags=["tables"])

_RESERVED_PARAMS = frozenset({"page", "limit", "sort", "search"})


def _int_param(request: Request, name: str, default: int, table_name: str) -> int:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidQueryError(
            f"Query parameter '{name}' must be an integer",
            ErrorContext(table_name=table_name),
        )


def _filters(request: Request) -> dict[str, str]:
    return {
        key: value for key, value in request.query_params.items()
        if key not in _RESERVED_PARAMS and value != ""
    }


@router.get(
    "/{table_name}", response_model=TablePageResponse, response_model_by_alias=True,
)
async def list_rows(
    table_name: str,
    request: Request,
    repo: TableRepository = Depends(get_table_repository),
):
    """One page of rows plus the total count of the filtered set."""
    page = await repo.list_rows(
        table_name,
        page=_int_param(request, "page", 1, table_name),
        limit=_int_param(request, "limit", DEFAULT_PAGE_SIZE, table_name),
        sort=request.query_params.get("sort") or None,
        search=request.query_params.get("search") or None,
        filters=_filters(request),
    )
    return page.to_response()


@router.get("/{table_name}/export", dependencies=[Depends(require_admin)])
async def export_rows(
    table_name: str,
    request: Request,
    repo: TableRepository = Depends(get_table_repository),
):
    """Every row matching the current sort/search/filters as CSV."""
    content = await repo.export_csv(
        table_name,
        sort=request.query_params.get("sort") or None,
        search=request.query_params.get("search") or None,
        filters=_filters(request),
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{table_name}.csv"'},
    )


@router.post("/{table_name}", status_code=201, dependencies=[Depends(require_admin)])
async def create_row(
    table_name: str,
    data: dict[str, Any] = Body(...),
    repo: TableRepository = Depends(get_table_repository),
):
    return await repo.create_row(table_name, data)


@router.put("/{table_name}/{row_id}", dependencies=[Depends(require_admin)])
async def update_row(
    table_name: str,
    row_id: int,
    data: dict[str, Any] = Body(...),
    repo: TableRepository = Depends(get_table_repository),
):
    return await repo.update_row(table_name, row_id, data)


@router.delete(
    "/{table_name}/{row_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_row(
    table_name: str,
    row_id: int,
    repo: TableRepository = Depends(get_table_repository),
):
    await repo.delete_row(table_name, row_id)
    return DeleteResponse()
