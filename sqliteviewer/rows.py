"""
Row query builder: filtered, sorted, paginated SELECTs plus matching counts.

SQL text only ever contains identifiers that passed the allow-list; search
terms, limits and offsets are bound parameters.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from adapters.db.base import DBAdapter
from sqliteviewer.catalog import SchemaCatalog
from sqliteviewer.identifiers import (
    is_safe_identifier,
    quote_identifier,
    require_identifier,
)
from sqliteviewer.metrics import track_operation
from sqliteviewer.types import ROWID_ALIAS, QueryResult, QuerySpec, TableData
from sqliteviewer.values import RowRecord, normalize_rows

log = logging.getLogger(__name__)

# Names that always resolve to the implicit row identifier
_ROWID_NAMES = {ROWID_ALIAS.lower(), "rowid", "_rowid_", "oid"}


class RowQueryBuilder:
    name = "rows"

    def __init__(self, db: DBAdapter, catalog: Optional[SchemaCatalog] = None):
        self.db = db
        self.catalog = catalog or SchemaCatalog(db)

    # ------------------------------------------------------------------
    # Clause builders
    # ------------------------------------------------------------------

    def _where_clause(
        self, columns: Sequence[str], search: Optional[str]
    ) -> Tuple[str, List[Any]]:
        """OR together one LIKE per column, each bound to %search%."""
        if not search:
            return "", []
        conditions: List[str] = []
        args: List[Any] = []
        pattern = f"%{search}%"
        for col in columns:
            conditions.append(f"{quote_identifier(col)} LIKE ?")
            args.append(pattern)
        if not conditions:
            return "", []
        return "WHERE (" + " OR ".join(conditions) + ")", args

    def _order_clause(self, columns: Sequence[str], spec: QuerySpec) -> str:
        """
        ORDER BY for a known, valid column; anything else means "no sort".

        Unknown or invalid sort columns are ignored instead of rejected so
        that stale UI state never turns into an error.
        """
        order_by = spec.order_by
        if not order_by:
            return ""
        known = {c.lower() for c in columns} | _ROWID_NAMES
        if not is_safe_identifier(order_by) or order_by.lower() not in known:
            log.warning(
                "Ignoring sort column",
                extra={"order_by": repr(order_by)},
            )
            return ""
        return f"ORDER BY {quote_identifier(order_by)} {spec.order_dir}"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def fetch(self, table: str, spec: QuerySpec) -> QueryResult:
        quoted = require_identifier(table)

        # Column names are needed whenever the caller filters or sorts
        columns: List[str] = []
        if spec.search or spec.order_by:
            columns = self.catalog.column_names(table)

        where, args = self._where_clause(columns, spec.search)
        order = self._order_clause(columns, spec)

        parts = [f"SELECT rowid AS {ROWID_ALIAS}, * FROM {quoted}"]
        if where:
            parts.append(where)
        if order:
            parts.append(order)
        parts.append("LIMIT ? OFFSET ?")
        sql = " ".join(parts)

        with track_operation("fetch"):
            cols, raw_rows = self.db.query(sql, [*args, spec.limit, spec.offset])
        rows = normalize_rows(cols, raw_rows)

        total = self._count(quoted, where, args)
        log.debug(
            "Fetched table page",
            extra={
                "table": table,
                "returned": len(rows),
                "total": total,
                "limit": spec.limit,
                "offset": spec.offset,
            },
        )
        return QueryResult(
            columns=cols,
            rows=rows,
            total=total,
            limit=spec.limit,
            offset=spec.offset,
        )

    def _count(self, quoted_table: str, where: str, args: Sequence[Any]) -> int:
        sql = f"SELECT COUNT(1) FROM {quoted_table}"
        if where:
            sql += " " + where
        with track_operation("count"):
            _, rows = self.db.query(sql, args)
        return int(rows[0][0]) if rows else 0

    def count(self, table: str, search: Optional[str] = None) -> int:
        """Row count under the same filter `fetch` would apply."""
        quoted = require_identifier(table)
        columns = self.catalog.column_names(table) if search else []
        where, args = self._where_clause(columns, search)
        return self._count(quoted, where, args)

    def fetch_all(self, table: str) -> TableData:
        """Every row, unfiltered and unpaginated, without the rowid alias."""
        quoted = require_identifier(table)
        with track_operation("fetch"):
            cols, raw_rows = self.db.query(f"SELECT * FROM {quoted}")
        return TableData(columns=cols, rows=normalize_rows(cols, raw_rows))

    def fetch_row(self, table: str, rowid: int) -> Optional[RowRecord]:
        """One row (with the rowid alias) by rowid, or None."""
        quoted = require_identifier(table)
        with track_operation("fetch"):
            cols, raw_rows = self.db.query(
                f"SELECT rowid AS {ROWID_ALIAS}, * FROM {quoted} WHERE rowid = ?",
                (rowid,),
            )
        rows = normalize_rows(cols, raw_rows)
        return rows[0] if rows else None
