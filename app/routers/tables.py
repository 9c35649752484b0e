from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import Response

from app.dependencies import get_viewer_service
from app.schemas import (
    ColumnModel,
    DeleteResponse,
    IndexModel,
    InsertResponse,
    SchemaResponse,
    TablePageResponse,
    TablesResponse,
    UpdateResponse,
)
from app.services.viewer_service import ViewerService
from sqliteviewer.values import json_safe_rows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])


@router.get("", name="list_tables", response_model=TablesResponse)
def list_tables(svc: ViewerService = Depends(get_viewer_service)) -> TablesResponse:
    return TablesResponse(tables=svc.list_tables())


@router.get("/{table}", name="table_data", response_model=TablePageResponse)
def table_data(
    table: str,
    # Raw strings: unparsable values fall back to defaults instead of a 422
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    order_by: Optional[str] = Query(None, alias="orderBy"),
    order_dir: Optional[str] = Query(None, alias="orderDir"),
    svc: ViewerService = Depends(get_viewer_service),
) -> TablePageResponse:
    result = svc.table_page(
        table,
        limit=limit,
        offset=offset,
        search=search,
        order_by=order_by,
        order_dir=order_dir,
    )
    return TablePageResponse(
        columns=result.columns,
        rows=json_safe_rows(result.rows),
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.get("/{table}/schema", name="table_schema", response_model=SchemaResponse)
def table_schema(
    table: str, svc: ViewerService = Depends(get_viewer_service)
) -> SchemaResponse:
    info = svc.table_schema(table)
    return SchemaResponse(
        schema_sql=info.schema,
        columns=[
            ColumnModel(
                cid=c.cid,
                name=c.name,
                type=c.type,
                notnull=c.not_null,
                pk=c.primary_key,
                dflt_value=c.default,
            )
            for c in info.columns
        ],
        indexes=[IndexModel(name=i.name, sql=i.sql) for i in info.indexes],
    )


@router.post("/{table}/rows", name="insert_row", response_model=InsertResponse)
def insert_row(
    table: str,
    payload: Dict[str, Any] = Body(...),
    svc: ViewerService = Depends(get_viewer_service),
) -> InsertResponse:
    rowid = svc.insert_row(table, payload)
    return InsertResponse(rowid=rowid)


@router.patch(
    "/{table}/rows/{rowid}", name="update_row", response_model=UpdateResponse
)
def update_row(
    table: str,
    rowid: str,
    payload: Dict[str, Any] = Body(...),
    svc: ViewerService = Depends(get_viewer_service),
) -> UpdateResponse:
    updated = svc.update_row(table, rowid, payload)
    return UpdateResponse(updated=updated)


@router.delete(
    "/{table}/rows/{rowid}", name="delete_row", response_model=DeleteResponse
)
def delete_row(
    table: str,
    rowid: str,
    svc: ViewerService = Depends(get_viewer_service),
) -> DeleteResponse:
    deleted = svc.delete_row(table, rowid)
    return DeleteResponse(deleted=deleted)


@router.get("/{table}/export", name="export_table")
def export_table(
    table: str,
    format: str = Query("csv"),
    svc: ViewerService = Depends(get_viewer_service),
) -> Response:
    payload = svc.export_table(table, format)
    logger.debug(
        "Serving export",
        extra={"table": table, "format": format, "bytes": len(payload.content)},
    )
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{payload.filename}"'
        },
    )
