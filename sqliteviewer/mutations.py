"""Row mutation engine keyed by SQLite's implicit rowid."""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Tuple

from adapters.db.base import DBAdapter
from sqliteviewer.errors import ErrorCode, NotFoundError, ValidationError
from sqliteviewer.identifiers import require_identifier
from sqliteviewer.metrics import track_operation
from sqliteviewer.types import ROWID_ALIAS
from sqliteviewer.values import is_scalar

log = logging.getLogger(__name__)

ROWID_COLUMN = "rowid"

MAX_ROWID = 2**63 - 1

_ROWID_RE = re.compile(r"[+-]?[0-9]+")


def parse_rowid(raw: Any) -> int:
    """
    Accept a positive 64-bit integer (or its ASCII decimal string form).

    Raises:
        ValidationError: for non-numeric, non-positive, out-of-range or boolean input.
    """
    value = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        # int() alone would also take "1_000" and non-ASCII digits
        if _ROWID_RE.fullmatch(text):
            value = int(text)
    if value is None or value <= 0 or value > MAX_ROWID:
        raise ValidationError(message="invalid rowid", code=ErrorCode.INVALID_ROWID)
    return value


def _bind_payload(payload: Mapping[str, Any]) -> Tuple[List[str], List[Any]]:
    """Validate every key and value; return (quoted columns, values) in payload order."""
    columns: List[str] = []
    values: List[Any] = []
    for col, val in payload.items():
        columns.append(require_identifier(col, kind="column"))
        if not is_scalar(val):
            raise ValidationError(
                message=f"invalid value for column: {col}",
                code=ErrorCode.INVALID_VALUE,
            )
        values.append(val)
    return columns, values


class RowMutationEngine:
    name = "mutations"

    def __init__(self, db: DBAdapter):
        self.db = db

    def insert(self, table: str, payload: Mapping[str, Any]) -> int:
        """Insert one row and return the rowid SQLite assigned to it."""
        quoted = require_identifier(table)
        if not payload:
            raise ValidationError(
                message="no columns to insert", code=ErrorCode.EMPTY_PAYLOAD
            )
        columns, values = _bind_payload(payload)

        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            quoted,
            ", ".join(columns),
            ", ".join("?" for _ in columns),
        )
        with track_operation("insert"):
            _, rowid = self.db.execute(sql, values)
        log.debug("Inserted row", extra={"table": table, "rowid": rowid})
        return rowid

    def update(self, table: str, rowid: Any, payload: Mapping[str, Any]) -> int:
        """
        Update the row with `rowid`. A `_rowid` key in the payload is ignored.

        Returns the number of rows updated (always 1 for a rowid table).
        """
        quoted = require_identifier(table)
        rid = parse_rowid(rowid)
        fields = {k: v for k, v in payload.items() if k != ROWID_ALIAS}
        if not fields:
            raise ValidationError(
                message="no columns to update", code=ErrorCode.EMPTY_PAYLOAD
            )
        columns, values = _bind_payload(fields)

        set_clause = ", ".join(f"{c} = ?" for c in columns)
        sql = f"UPDATE {quoted} SET {set_clause} WHERE {ROWID_COLUMN} = ?"
        with track_operation("update"):
            affected, _ = self.db.execute(sql, [*values, rid])
        if affected == 0:
            raise NotFoundError(message="row not found", code=ErrorCode.ROW_NOT_FOUND)
        log.debug("Updated row", extra={"table": table, "rowid": rid})
        return affected

    def delete(self, table: str, rowid: Any) -> int:
        quoted = require_identifier(table)
        rid = parse_rowid(rowid)
        with track_operation("delete"):
            affected, _ = self.db.execute(
                f"DELETE FROM {quoted} WHERE {ROWID_COLUMN} = ?", (rid,)
            )
        if affected == 0:
            raise NotFoundError(message="row not found", code=ErrorCode.ROW_NOT_FOUND)
        log.debug("Deleted row", extra={"table": table, "rowid": rid})
        return affected
