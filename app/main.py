import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from sqliteviewer.prom import REGISTRY
from app.dependencies import get_db
from app.routers import catalog, query, tables
from app.settings import get_settings
from app.errors import DependencyError
from app.exception_handlers import register_exception_handlers

try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # Best-effort .env loading; app must not crash if dotenv is missing.
    pass

log = logging.getLogger(__name__)

settings = get_settings()


def _resolve_db(app: FastAPI):
    return app.dependency_overrides.get(get_db, get_db)()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open and verify the shared handle before accepting traffic;
    # any failure here aborts startup.
    db = _resolve_db(app)
    db.ping()
    log.info("Database verified, accepting traffic")
    yield
    if get_db not in app.dependency_overrides:
        db.close()


# ----------------------------------------------------------------------------
#  App definition
# ----------------------------------------------------------------------------
application = FastAPI(
    title="SQLite Viewer",
    version=settings.app_version,
    description="Inspect and edit a SQLite database file over HTTP",
    lifespan=lifespan,
)
register_exception_handlers(application)

application.include_router(tables.router, prefix="/api")
application.include_router(query.router, prefix="/api")
application.include_router(catalog.router, prefix="/api")


@application.exception_handler(HTTPException)
async def http_exception_to_error_contract(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# ----------------------------------------------------------------------------
#  Prometheus Metrics Middleware
# ----------------------------------------------------------------------------
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["path", "method", "status_code"],
    registry=REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)


@application.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - start
    route = request.scope.get("route")
    path = getattr(route, "path", None) or request.url.path
    name = getattr(route, "name", None) or path

    REQUEST_COUNT.labels(
        path=name,
        method=request.method,
        status_code=str(getattr(response, "status_code", 500)),
    ).inc()
    REQUEST_LATENCY.labels(path=name, method=request.method).observe(elapsed)
    return response


# ----------------------------------------------------------------------------
#  System Endpoints
# ----------------------------------------------------------------------------
@application.get("/healthz", response_class=PlainTextResponse, tags=["system"])
def healthz() -> str:
    return "ok"


@application.get("/readyz", response_class=PlainTextResponse, tags=["system"])
def readyz() -> str:
    """Readiness probe: ping the shared SQLite handle."""
    try:
        _resolve_db(application).ping()
        return "ready"
    except Exception:
        log.exception("Readiness check failed")
        raise DependencyError(message="not ready")


@application.get("/metrics", tags=["system"])
def metrics():
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


# ----------------------------------------------------------------------------
#  Frontend (SPA) fallback
# ----------------------------------------------------------------------------
def _not_found() -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": {
                "code": "not_found",
                "message": "not found",
                "retryable": False,
            }
        },
    )


def _static_file(root: Path, rel: str) -> Path | None:
    candidate = (root / rel).resolve()
    # Never serve anything outside the static root
    if root != candidate and root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate


@application.get("/{path:path}", include_in_schema=False)
async def spa_fallback(request: Request, path: str):
    if request.url.path == "/api" or request.url.path.startswith("/api/"):
        raise _not_found()

    static_dir = get_settings().static_dir
    if not static_dir:
        raise _not_found()

    root = Path(static_dir).resolve()
    target = _static_file(root, path or "index.html") or _static_file(
        root, "index.html"
    )
    if target is None:
        raise _not_found()
    return FileResponse(target)


app = application
