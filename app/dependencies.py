import logging
from functools import lru_cache

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from app.errors import DatabaseNotConfigured
from app.services.viewer_service import ViewerService
from app.settings import get_settings

log = logging.getLogger(__name__)


@lru_cache()
def get_db() -> SQLiteAdapter:
    """
    The single shared storage handle for the process.

    Opened lazily on first use; tests replace it through
    app.dependency_overrides[get_db].
    """
    settings = get_settings()
    if not settings.db_path:
        raise DatabaseNotConfigured("SQLITE_VIEWER_DB is not configured")
    return SQLiteAdapter(settings.db_path, timeout=settings.busy_timeout_sec)


def get_viewer_service(db: SQLiteAdapter = Depends(get_db)) -> ViewerService:
    """Per-request service wired to the shared handle."""
    return ViewerService(db=db, settings=get_settings())
