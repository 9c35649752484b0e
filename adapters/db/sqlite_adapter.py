import sqlite3
import logging
from typing import Any, List, Optional, Tuple
from adapters.db.base import DBAdapter, Params
from pathlib import Path
from urllib.parse import quote

from sqliteviewer.errors import ErrorCode, StorageError

log = logging.getLogger(__name__)

_LOCKED_MARKERS = ("database is locked", "database table is locked", "busy")


def _to_storage_error(exc: Exception) -> StorageError:
    """Driver failures, and parameters outside SQLite's 64-bit INTEGER range, become StorageError."""
    message = str(exc)
    code = ErrorCode.STORAGE_ERROR
    if isinstance(exc, sqlite3.OperationalError) and any(
        m in message.lower() for m in _LOCKED_MARKERS
    ):
        code = ErrorCode.DB_LOCKED
    return StorageError(message=message, code=code)


class SQLiteAdapter(DBAdapter):
    """
    One long-lived connection shared by all requests.

    - autocommit (isolation_level=None): every statement is its own transaction
    - check_same_thread=False: FastAPI runs sync handlers on a thread pool
    - mode=rw URI: the file must already exist; never create an empty DB
    """

    name = "sqlite"
    dialect = "sqlite"

    def __init__(self, path: str, timeout: float = 5.0):
        # resolve absolute path for safety
        self.path = Path(path).resolve()
        if not self.path.exists():
            raise FileNotFoundError(f"SQLite DB does not exist: {self.path}")
        if self.path.is_dir():
            raise IsADirectoryError(f"SQLite DB path is a directory: {self.path}")

        uri = f"file:{quote(str(self.path))}?mode=rw"
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
            uri,
            uri=True,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        log.info("SQLiteAdapter opened shared connection to: %s", self.path)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(message="database connection is closed")
        return self._conn

    def query(self, sql: str, params: Params = ()) -> Tuple[List[str], List[Tuple[Any, ...]]]:
        log.debug("Executing SQL: %s", sql.strip().replace("\n", " "))
        try:
            cur = self.conn.execute(sql, tuple(params))
            try:
                # Statements without a result set (e.g. a CTE wrapping DML) have no description
                cols = [d[0] for d in (cur.description or ())]
                rows = cur.fetchall() if cur.description else []
            finally:
                cur.close()
        except (sqlite3.Error, OverflowError) as e:
            raise _to_storage_error(e) from e
        log.debug("Query returned %d rows.", len(rows))
        return cols, rows

    def execute(self, sql: str, params: Params = ()) -> Tuple[int, int]:
        log.debug("Executing SQL: %s", sql.strip().replace("\n", " "))
        try:
            cur = self.conn.execute(sql, tuple(params))
            try:
                affected = max(cur.rowcount, 0)
                last_id = cur.lastrowid or 0
            finally:
                cur.close()
        except (sqlite3.Error, OverflowError) as e:
            raise _to_storage_error(e) from e
        log.debug("Statement affected %d rows.", affected)
        return affected, last_id

    def ping(self) -> None:
        self.query("SELECT 1")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            log.info("SQLiteAdapter closed connection to: %s", self.path)
