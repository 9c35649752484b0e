from sqliteviewer.errors.codes import ErrorCode
from sqliteviewer.errors.exceptions import (
    DataAccessError,
    NotFoundError,
    StorageError,
    ValidationError,
)

__all__ = [
    "ErrorCode",
    "DataAccessError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
