"""
Schema catalog reader.

Everything here re-reads ``sqlite_master`` / ``PRAGMA table_info`` on each
call; nothing is cached, so callers always see the current file state.
"""

from __future__ import annotations

import logging
from typing import List

from adapters.db.base import DBAdapter
from sqliteviewer.errors import ErrorCode, NotFoundError
from sqliteviewer.identifiers import require_identifier
from sqliteviewer.types import ColumnDescriptor, IndexInfo, ViewInfo
from sqliteviewer.values import as_optional_text

log = logging.getLogger(__name__)


class SchemaCatalog:
    name = "catalog"

    def __init__(self, db: DBAdapter):
        self.db = db

    def list_tables(self) -> List[str]:
        _, rows = self.db.query(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
            "ORDER BY name"
        )
        return [r[0] for r in rows if r and r[0]]

    def table_definition_sql(self, table: str) -> str:
        """Return the CREATE statement for `table` or raise NotFoundError."""
        require_identifier(table)
        _, rows = self.db.query(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        )
        if not rows or rows[0][0] is None:
            raise NotFoundError(
                message="schema not found", code=ErrorCode.TABLE_NOT_FOUND
            )
        return str(rows[0][0])

    def columns(self, table: str) -> List[ColumnDescriptor]:
        quoted = require_identifier(table)
        _, rows = self.db.query(f"PRAGMA table_info({quoted})")
        # Rows are (cid, name, type, notnull, dflt_value, pk)
        return [
            ColumnDescriptor(
                cid=int(r[0]),
                name=str(r[1]),
                type=str(r[2] or ""),
                not_null=bool(r[3]),
                primary_key=bool(r[5]),
                default=as_optional_text(r[4]),
            )
            for r in rows
        ]

    def column_names(self, table: str) -> List[str]:
        return [c.name for c in self.columns(table)]

    def indexes(self, table: str) -> List[IndexInfo]:
        require_identifier(table)
        _, rows = self.db.query(
            "SELECT name, tbl_name, sql FROM sqlite_master "
            "WHERE type = 'index' AND tbl_name = ? ORDER BY name",
            (table,),
        )
        return [IndexInfo(name=r[0], table=r[1], sql=r[2] or "") for r in rows]

    def all_indexes(self) -> List[IndexInfo]:
        _, rows = self.db.query(
            "SELECT name, tbl_name, sql FROM sqlite_master "
            "WHERE type = 'index' AND name NOT LIKE 'sqlite_%' "
            "ORDER BY tbl_name, name"
        )
        return [IndexInfo(name=r[0], table=r[1], sql=r[2] or "") for r in rows]

    def views(self) -> List[ViewInfo]:
        _, rows = self.db.query(
            "SELECT name, sql FROM sqlite_master WHERE type = 'view' ORDER BY name"
        )
        return [ViewInfo(name=r[0], sql=r[1] or "") for r in rows]
