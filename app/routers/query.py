from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends

from app.dependencies import get_viewer_service
from app.schemas import QueryRequest, SelectQueryResponse, WriteQueryResponse
from app.services.viewer_service import ViewerService
from sqliteviewer.types import SelectResult
from sqliteviewer.values import json_safe_rows

router = APIRouter(tags=["query"])


@router.post(
    "/query",
    name="execute_query",
    response_model=Union[SelectQueryResponse, WriteQueryResponse],
)
def execute_query(
    request: QueryRequest,
    svc: ViewerService = Depends(get_viewer_service),
) -> Union[SelectQueryResponse, WriteQueryResponse]:
    result = svc.run_query(request.query)
    if isinstance(result, SelectResult):
        return SelectQueryResponse(columns=result.columns, rows=json_safe_rows(result.rows))
    return WriteQueryResponse(
        rows_affected=result.rows_affected,
        last_insert_id=result.last_insert_id,
    )
