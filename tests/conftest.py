import sqlite3

import pytest
from fastapi.testclient import TestClient

from adapters.db.sqlite_adapter import SQLiteAdapter
from app.dependencies import get_db
from app.main import app

USERS = [
    (1, "Alice", 34),
    (2, "Bob", 27),
    (3, "Carol", 45),
]


def make_db(db_path) -> None:
    """Create a small SQLite file with a rowid table, an index and a view."""
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("CREATE TABLE users(id INTEGER PRIMARY KEY, name TEXT, age INTEGER);")
        conn.executemany("INSERT INTO users VALUES (?, ?, ?);", USERS)
        conn.execute(
            "CREATE TABLE notes(title TEXT NOT NULL DEFAULT 'untitled', body TEXT, data BLOB);"
        )
        conn.execute("CREATE INDEX idx_users_name ON users(name);")
        conn.execute("CREATE VIEW adults AS SELECT * FROM users WHERE age >= 30;")
        conn.commit()
    finally:
        conn.close()


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.db"
    make_db(path)
    return path


@pytest.fixture
def adapter(db_path):
    db = SQLiteAdapter(str(db_path))
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(adapter):
    """TestClient wired to the per-test database through the shared-handle dependency."""
    app.dependency_overrides[get_db] = lambda: adapter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
