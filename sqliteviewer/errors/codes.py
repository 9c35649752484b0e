from enum import Enum


class ErrorCode(str, Enum):
    # --- Validation (no SQL executed) ---
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_ROWID = "INVALID_ROWID"
    EMPTY_PAYLOAD = "EMPTY_PAYLOAD"
    INVALID_VALUE = "INVALID_VALUE"
    EMPTY_QUERY = "EMPTY_QUERY"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"

    # --- Not found ---
    ROW_NOT_FOUND = "ROW_NOT_FOUND"
    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"

    # --- Storage engine ---
    STORAGE_ERROR = "STORAGE_ERROR"
    DB_LOCKED = "DB_LOCKED"
