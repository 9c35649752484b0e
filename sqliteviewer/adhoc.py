from __future__ import annotations

import logging

import sqlglot

from adapters.db.base import DBAdapter
from sqliteviewer.errors import ErrorCode, ValidationError
from sqliteviewer.metrics import adhoc_statements_total, track_operation
from sqliteviewer.types import AdHocResult, SelectResult, WriteResult
from sqliteviewer.values import normalize_rows

log = logging.getLogger(__name__)

_READ_PREFIXES = ("SELECT", "WITH")


def is_read_query(sql: str) -> bool:
    """
    Lexical read/write classification: SELECT or WITH prefix means read.

    Best-effort only. A CTE wrapping DML is classified as a read, and a
    leading comment makes any SELECT a write. This is not a safety check.
    """
    return sql.strip().upper().startswith(_READ_PREFIXES)


def statement_kind(sql: str) -> str:
    """
    Parsed root expression name (e.g. "select", "drop", "insert").

    Informational (logs and metrics); it never influences classification.
    """
    try:
        tree = sqlglot.parse_one(sql, read="sqlite")
    except Exception:
        return "unknown"
    if tree is None:
        return "unknown"
    return type(tree).__name__.lower()


class AdHocExecutor:
    """Run caller-supplied SQL and return a select or write result."""

    name = "adhoc"

    def __init__(self, db: DBAdapter):
        self.db = db

    def execute(self, sql: str) -> AdHocResult:
        if not sql or not sql.strip():
            raise ValidationError(
                message="query cannot be empty", code=ErrorCode.EMPTY_QUERY
            )

        kind = "select" if is_read_query(sql) else "write"
        statement = statement_kind(sql)
        adhoc_statements_total.labels(kind=kind, statement=statement).inc()
        log.debug(
            "Executing ad-hoc statement",
            extra={"kind": kind, "statement": statement, "sql_length": len(sql)},
        )

        with track_operation("adhoc"):
            if kind == "select":
                cols, raw_rows = self.db.query(sql)
                return SelectResult(columns=cols, rows=normalize_rows(cols, raw_rows))

            affected, last_id = self.db.execute(sql)
            return WriteResult(
                rows_affected=affected,
                last_insert_id=last_id,
                statement=statement,
            )
