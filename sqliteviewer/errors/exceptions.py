from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sqliteviewer.errors.codes import ErrorCode


@dataclass
class DataAccessError(Exception):
    """Base class for failures raised by the data-access layer."""

    message: str
    code: ErrorCode = ErrorCode.STORAGE_ERROR
    details: Optional[List[str]] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationError(DataAccessError):
    """Bad input caught before any SQL was executed."""

    code: ErrorCode = ErrorCode.INVALID_IDENTIFIER


@dataclass
class NotFoundError(DataAccessError):
    """The statement ran but matched nothing (e.g. zero rows affected)."""

    code: ErrorCode = ErrorCode.ROW_NOT_FOUND


@dataclass
class StorageError(DataAccessError):
    """Failure reported by the storage engine; message is the driver's, verbatim."""

    code: ErrorCode = ErrorCode.STORAGE_ERROR
