from sqliteviewer.errors.codes import ErrorCode

ERROR_MAP = {
    ErrorCode.INVALID_IDENTIFIER: (400, False),
    ErrorCode.INVALID_ROWID: (400, False),
    ErrorCode.EMPTY_PAYLOAD: (400, False),
    ErrorCode.INVALID_VALUE: (400, False),
    ErrorCode.EMPTY_QUERY: (400, False),
    ErrorCode.UNSUPPORTED_FORMAT: (400, False),
    ErrorCode.ROW_NOT_FOUND: (404, False),
    ErrorCode.TABLE_NOT_FOUND: (404, False),
    ErrorCode.STORAGE_ERROR: (400, False),
    ErrorCode.DB_LOCKED: (503, True),
}


def map_error(code: ErrorCode | None) -> tuple[int, bool]:
    if code is None:
        return (500, False)
    return ERROR_MAP.get(code, (500, False))
