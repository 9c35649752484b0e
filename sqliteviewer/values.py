"""
Value normalization shared by every read path.

Cells are modelled as a small tagged variant (see :class:`CellKind`). The
driver hands back Python natives; the only coercion is collapsing byte
buffers into text so JSON, CSV and SQL-literal encodings all see the same
value.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

CellValue = Union[None, bool, int, float, str, bytes]
RowRecord = Dict[str, CellValue]


class CellKind(str, Enum):
    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BOOLEAN = "boolean"
    BLOB = "blob"


def normalize(value: Any) -> CellValue:
    """Byte buffers become text (UTF-8, invalid bytes replaced); all else passes through."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return value


def kind_of(value: Any) -> CellKind:
    if value is None:
        return CellKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, int):
        return CellKind.INTEGER
    if isinstance(value, float):
        return CellKind.REAL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return CellKind.BLOB
    return CellKind.TEXT


def is_scalar(value: Any) -> bool:
    """JSON scalars accepted as bound parameters for mutations."""
    return value is None or isinstance(value, (bool, int, float, str))


def normalize_row(columns: Sequence[str], values: Iterable[Any]) -> RowRecord:
    return {col: normalize(v) for col, v in zip(columns, values)}


def normalize_rows(
    columns: Sequence[str], rows: Iterable[Sequence[Any]]
) -> List[RowRecord]:
    return [normalize_row(columns, r) for r in rows]


def as_optional_text(value: Any) -> Optional[str]:
    value = normalize(value)
    if value is None:
        return None
    return str(value)


def json_safe(value: Any) -> CellValue:
    """Like :func:`normalize`, but non-finite REALs become None; JSON has no Infinity."""
    value = normalize(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def json_safe_rows(rows: Iterable[RowRecord]) -> List[RowRecord]:
    return [{col: json_safe(v) for col, v in row.items()} for row in rows]
