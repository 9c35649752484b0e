import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram
from sqliteviewer.prom import REGISTRY


# -----------------------------------------------------------------------------
#  Data-access operations
# -----------------------------------------------------------------------------
db_operations_total = Counter(
    "db_operations_total",
    "Count of data-access operations by outcome",
    ["operation", "ok"],  # e.g. fetch|count|insert|update|delete|adhoc|export
    registry=REGISTRY,
)

db_operation_duration_ms = Histogram(
    "db_operation_duration_ms",
    "Duration (ms) of each data-access operation",
    ["operation"],
    buckets=(1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000, 10000, 30000),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Identifier validation
# -----------------------------------------------------------------------------
identifier_rejections_total = Counter(
    "identifier_rejections_total",
    "Count of table/column names rejected by the identifier allow-list",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Ad-hoc queries
# -----------------------------------------------------------------------------
adhoc_statements_total = Counter(
    "adhoc_statements_total",
    "Ad-hoc statements by lexical class and parsed statement kind",
    ["kind", "statement"],  # kind: select|write
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Exports
# -----------------------------------------------------------------------------
exports_total = Counter(
    "exports_total",
    "Full-table exports by encoding",
    ["format"],  # csv|json|sql
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
#  Prime label sets with zero so dashboards always have series
# -----------------------------------------------------------------------------
for operation in (
    "fetch",
    "count",
    "insert",
    "update",
    "delete",
    "adhoc",
    "export",
):
    for ok in ("true", "false"):
        db_operations_total.labels(operation=operation, ok=ok).inc(0)

for fmt in ("csv", "json", "sql"):
    exports_total.labels(format=fmt).inc(0)

for kind in ("select", "write"):
    adhoc_statements_total.labels(kind=kind, statement="unknown").inc(0)


@contextmanager
def track_operation(operation: str) -> Iterator[None]:
    """Count and time one data-access operation; failures are labelled ok=false."""
    t0 = time.perf_counter()
    ok = False
    try:
        yield
        ok = True
    finally:
        dt_ms = (time.perf_counter() - t0) * 1000
        db_operation_duration_ms.labels(operation=operation).observe(dt_ms)
        db_operations_total.labels(
            operation=operation, ok=("true" if ok else "false")
        ).inc()
