from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import AppError
from sqliteviewer.errors import DataAccessError
from sqliteviewer.errors.mapper import map_error


def _error_response(
    request: Request,
    *,
    status: int,
    code: str,
    message: str,
    retryable: bool,
    details: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    payload = {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "retryable": retryable,
            "request_id": request_id,
            "extra": extra or {},
        }
    }

    headers = {"X-Request-ID": request_id}
    if retryable:
        headers["Retry-After"] = "2"

    return JSONResponse(status_code=status, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for the FastAPI application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _error_response(
            request,
            status=getattr(exc, "http_status", 500),
            code=getattr(exc, "code", "app_error"),
            message=getattr(exc, "message", str(exc)),
            retryable=bool(getattr(exc, "retryable", False)),
            details=getattr(exc, "details", None),
            extra=getattr(exc, "extra", {}) or {},
        )

    @app.exception_handler(DataAccessError)
    async def data_access_error_handler(
        request: Request, exc: DataAccessError
    ) -> JSONResponse:
        # Single source of truth for HTTP semantics
        status, retryable = map_error(exc.code)
        return _error_response(
            request,
            status=status,
            code=exc.code.value,
            message=exc.message,
            retryable=retryable,
            details=exc.details,
        )
