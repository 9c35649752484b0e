from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Union

from sqliteviewer.values import RowRecord

ROWID_ALIAS = "_rowid"
DEFAULT_LIMIT = 100

SortDirection = Literal["ASC", "DESC"]


# =====================
# Schema catalog
# =====================


@dataclass(frozen=True)
class ColumnDescriptor:
    cid: int
    name: str
    type: str
    not_null: bool
    primary_key: bool
    default: Optional[str] = None


@dataclass(frozen=True)
class IndexInfo:
    name: str
    table: str
    # Auto-generated indexes have no definition text
    sql: str = ""


@dataclass(frozen=True)
class ViewInfo:
    name: str
    sql: str = ""


# =====================
# Row listing
# =====================


def _to_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class QuerySpec:
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    search: Optional[str] = None
    order_by: Optional[str] = None
    order_dir: SortDirection = "ASC"

    @classmethod
    def from_params(
        cls,
        *,
        limit: Any = None,
        offset: Any = None,
        search: Optional[str] = None,
        order_by: Optional[str] = None,
        order_dir: Optional[str] = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "QuerySpec":
        """
        Build a QuerySpec from loosely-typed request parameters.

        - limit: missing, unparsable or <= 0 -> default_limit
        - offset: missing, unparsable or < 0 -> 0
        - order_dir: case-insensitive ASC/DESC, anything else -> ASC
        - empty search / order_by collapse to None
        """
        lim = _to_int(limit)
        if lim is None or lim <= 0:
            lim = default_limit

        off = _to_int(offset)
        if off is None or off < 0:
            off = 0

        direction: SortDirection = "ASC"
        if order_dir and order_dir.strip().upper() == "DESC":
            direction = "DESC"

        return cls(
            limit=lim,
            offset=off,
            search=search or None,
            order_by=order_by or None,
            order_dir=direction,
        )


@dataclass(frozen=True)
class QueryResult:
    columns: List[str]
    rows: List[RowRecord]
    total: int
    limit: int
    offset: int


@dataclass(frozen=True)
class TableData:
    """Unfiltered, unpaginated content of a table (export input)."""

    columns: List[str]
    rows: List[RowRecord] = field(default_factory=list)


# =====================
# Ad-hoc queries
# =====================


@dataclass(frozen=True)
class SelectResult:
    columns: List[str]
    rows: List[RowRecord]
    kind: Literal["select"] = "select"


@dataclass(frozen=True)
class WriteResult:
    rows_affected: int
    last_insert_id: int
    kind: Literal["write"] = "write"
    # Parsed statement class, informational only
    statement: str = "unknown"


AdHocResult = Union[SelectResult, WriteResult]


# =====================
# Export
# =====================


@dataclass(frozen=True)
class ExportPayload:
    filename: str
    media_type: str
    content: bytes
