from typing import Any, List, Protocol, Sequence, Tuple

Params = Sequence[Any]


class DBAdapter(Protocol):
    """Shared storage handle used by every data-access component."""

    name: str
    dialect: str

    def query(self, sql: str, params: Params = ()) -> Tuple[List[str], List[Tuple[Any, ...]]]:
        """Run a statement that returns rows; return (columns, rows)."""

    def execute(self, sql: str, params: Params = ()) -> Tuple[int, int]:
        """Run a write/DDL statement; return (rows_affected, last_insert_id)."""

    def ping(self) -> None:
        """Raise if the database cannot be reached."""

    def close(self) -> None:
        """Release the underlying connection."""
