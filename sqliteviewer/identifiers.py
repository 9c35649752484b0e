"""
Allow-list validation and quoting for dynamic SQL identifiers.

Placeholders cannot stand in for table or column names, so every name that
ends up in SQL text must pass :func:`is_safe_identifier` first. Values never
go through here; they are always bound as parameters.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from sqliteviewer.errors import ErrorCode, ValidationError
from sqliteviewer.metrics import identifier_rejections_total

log = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_.]+")

QUOTE_CHAR = '"'


def is_safe_identifier(name: Any) -> bool:
    """True iff `name` is a non-empty string made only of [A-Za-z0-9_.]."""
    if not isinstance(name, str) or not name:
        return False
    # fullmatch on an ASCII class; `\w` would also let Unicode letters through
    return _IDENTIFIER_RE.fullmatch(name) is not None


def quote_identifier(name: str) -> str:
    """Wrap `name` in double quotes, doubling any embedded quote."""
    return QUOTE_CHAR + name.replace(QUOTE_CHAR, QUOTE_CHAR * 2) + QUOTE_CHAR


def require_identifier(name: Any, *, kind: str = "table") -> str:
    """
    Validate and quote in one step.

    Raises:
        ValidationError: when `name` fails the allow-list.
    """
    if not is_safe_identifier(name):
        identifier_rejections_total.inc()
        log.debug("Rejected identifier", extra={"kind": kind, "identifier": repr(name)})
        if kind == "table":
            message = "invalid table name"
        else:
            message = f"invalid {kind}: {name}"
        raise ValidationError(message=message, code=ErrorCode.INVALID_IDENTIFIER)
    return quote_identifier(name)
