from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from adapters.db.base import DBAdapter
from app.settings import Settings
from sqliteviewer.adhoc import AdHocExecutor
from sqliteviewer.catalog import SchemaCatalog
from sqliteviewer.export import TableExporter
from sqliteviewer.identifiers import require_identifier
from sqliteviewer.mutations import RowMutationEngine
from sqliteviewer.rows import RowQueryBuilder
from sqliteviewer.types import (
    AdHocResult,
    ColumnDescriptor,
    ExportPayload,
    IndexInfo,
    QueryResult,
    QuerySpec,
    ViewInfo,
)

log = logging.getLogger(__name__)


@dataclass
class TableSchema:
    schema: str
    columns: List[ColumnDescriptor]
    indexes: List[IndexInfo]


@dataclass
class ViewerService:
    """
    Application-level service for the table viewer.

    Responsibilities:
        - Turn loosely-typed request parameters into data-access calls.
        - Hold the shared storage handle and the components built on it.

    Every call re-reads current database state; nothing is cached here.
    """

    db: DBAdapter
    settings: Settings
    catalog: SchemaCatalog = field(init=False)
    rows: RowQueryBuilder = field(init=False)
    mutations: RowMutationEngine = field(init=False)
    adhoc: AdHocExecutor = field(init=False)
    exporter: TableExporter = field(init=False)

    def __post_init__(self) -> None:
        self.catalog = SchemaCatalog(self.db)
        self.rows = RowQueryBuilder(self.db, self.catalog)
        self.mutations = RowMutationEngine(self.db)
        self.adhoc = AdHocExecutor(self.db)
        self.exporter = TableExporter(self.rows, self.catalog)

    # --- catalog ---

    def list_tables(self) -> List[str]:
        return self.catalog.list_tables()

    def table_schema(self, table: str) -> TableSchema:
        require_identifier(table)
        return TableSchema(
            schema=self.catalog.table_definition_sql(table),
            columns=self.catalog.columns(table),
            indexes=self.catalog.indexes(table),
        )

    def list_indexes(self) -> List[IndexInfo]:
        return self.catalog.all_indexes()

    def list_views(self) -> List[ViewInfo]:
        return self.catalog.views()

    # --- rows ---

    def table_page(
        self,
        table: str,
        *,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
        search: Optional[str] = None,
        order_by: Optional[str] = None,
        order_dir: Optional[str] = None,
    ) -> QueryResult:
        spec = QuerySpec.from_params(
            limit=limit,
            offset=offset,
            search=search,
            order_by=order_by,
            order_dir=order_dir,
            default_limit=self.settings.default_page_size,
        )
        return self.rows.fetch(table, spec)

    def insert_row(self, table: str, payload: Mapping[str, Any]) -> int:
        return self.mutations.insert(table, payload)

    def update_row(self, table: str, rowid: Any, payload: Mapping[str, Any]) -> int:
        return self.mutations.update(table, rowid, payload)

    def delete_row(self, table: str, rowid: Any) -> int:
        return self.mutations.delete(table, rowid)

    # --- export / ad-hoc ---

    def export_table(self, table: str, fmt: str) -> ExportPayload:
        return self.exporter.export(table, fmt)

    def run_query(self, sql: str) -> AdHocResult:
        return self.adhoc.execute(sql)
