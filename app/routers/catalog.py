from fastapi import APIRouter, Depends

from app.dependencies import get_viewer_service
from app.schemas import IndexesResponse, TableIndexModel, ViewModel, ViewsResponse
from app.services.viewer_service import ViewerService

router = APIRouter(tags=["catalog"])


@router.get("/indexes", name="list_indexes", response_model=IndexesResponse)
def list_indexes(svc: ViewerService = Depends(get_viewer_service)) -> IndexesResponse:
    return IndexesResponse(
        indexes=[
            TableIndexModel(name=i.name, table=i.table, sql=i.sql)
            for i in svc.list_indexes()
        ]
    )


@router.get("/views", name="list_views", response_model=ViewsResponse)
def list_views(svc: ViewerService = Depends(get_viewer_service)) -> ViewsResponse:
    return ViewsResponse(views=[ViewModel(name=v.name, sql=v.sql) for v in svc.list_views()])
