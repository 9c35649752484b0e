"""
Full-table export encoders: CSV, JSON and a SQL replay script.

All three consume one unfiltered fetch from :class:`RowQueryBuilder`; the
SQL encoder additionally needs the table's CREATE statement.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import math
from typing import Any, Callable, Dict

from sqliteviewer.catalog import SchemaCatalog
from sqliteviewer.errors import ErrorCode, ValidationError
from sqliteviewer.identifiers import quote_identifier, require_identifier
from sqliteviewer.metrics import exports_total, track_operation
from sqliteviewer.rows import RowQueryBuilder
from sqliteviewer.types import ExportPayload, TableData
from sqliteviewer.values import CellKind, json_safe_rows, kind_of, normalize

log = logging.getLogger(__name__)


# ------------------------- Per-cell encodings -------------------------


def csv_field(value: Any) -> str:
    value = normalize(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sql_literal(value: Any) -> str:
    """Render a cell as a SQL literal: NULL, 1/0, bare numbers, quoted text."""
    kind = kind_of(value)
    if kind is CellKind.NULL:
        return "NULL"
    if kind is CellKind.BOOLEAN:
        return "1" if value else "0"
    if kind is CellKind.INTEGER:
        return str(value)
    if kind is CellKind.REAL:
        if math.isinf(value):
            # out-of-range literals read back as +/-Inf
            return "9e999" if value > 0 else "-9e999"
        return repr(value)
    text = str(normalize(value))
    return "'" + text.replace("'", "''") + "'"


# ------------------------- Table encoders -------------------------


def encode_csv(data: TableData) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(data.columns)
    for row in data.rows:
        writer.writerow([csv_field(row.get(col)) for col in data.columns])
    return buf.getvalue()


def encode_json(data: TableData) -> str:
    return json.dumps(json_safe_rows(data.rows), ensure_ascii=False, allow_nan=False) + "\n"


def encode_sql(table: str, schema_sql: str, data: TableData) -> str:
    quoted_table = quote_identifier(table)
    col_list = ", ".join(quote_identifier(c) for c in data.columns)

    lines = [schema_sql + ";", f"DELETE FROM {quoted_table};"]
    for row in data.rows:
        values = ", ".join(sql_literal(row.get(col)) for col in data.columns)
        lines.append(f"INSERT INTO {quoted_table} ({col_list}) VALUES ({values});")
    return "\n".join(lines) + "\n"


class TableExporter:
    name = "export"

    FORMATS: Dict[str, str] = {
        "csv": "text/csv",
        "json": "application/json",
        "sql": "application/sql",
    }

    def __init__(self, rows: RowQueryBuilder, catalog: SchemaCatalog):
        self.rows = rows
        self.catalog = catalog

    def export(self, table: str, fmt: str = "csv") -> ExportPayload:
        require_identifier(table)
        fmt = (fmt or "csv").lower()
        if fmt not in self.FORMATS:
            raise ValidationError(
                message="unsupported format", code=ErrorCode.UNSUPPORTED_FORMAT
            )

        encoders: Dict[str, Callable[[], str]] = {
            "csv": lambda: encode_csv(self.rows.fetch_all(table)),
            "json": lambda: encode_json(self.rows.fetch_all(table)),
            "sql": lambda: self._encode_sql(table),
        }
        with track_operation("export"):
            text = encoders[fmt]()
        exports_total.labels(format=fmt).inc()
        log.debug("Exported table", extra={"table": table, "format": fmt})

        return ExportPayload(
            filename=f"{table}.{fmt}",
            media_type=self.FORMATS[fmt],
            content=text.encode("utf-8"),
        )

    def _encode_sql(self, table: str) -> str:
        # Schema first: a missing table is a NotFoundError before any row read
        schema_sql = self.catalog.table_definition_sql(table)
        return encode_sql(table, schema_sql, self.rows.fetch_all(table))
