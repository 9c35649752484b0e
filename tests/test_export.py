import csv
import io
import json
import sqlite3

import pytest

from sqliteviewer.catalog import SchemaCatalog
from sqliteviewer.errors import ErrorCode, NotFoundError, ValidationError
from sqliteviewer.export import TableExporter, csv_field, sql_literal
from sqliteviewer.rows import RowQueryBuilder


def _exporter(adapter):
    catalog = SchemaCatalog(adapter)
    return TableExporter(RowQueryBuilder(adapter, catalog), catalog)


def test_csv_header_and_rows_match_unfiltered_fetch(adapter):
    payload = _exporter(adapter).export("users", "csv")
    assert payload.filename == "users.csv"
    assert payload.media_type == "text/csv"

    records = list(csv.reader(io.StringIO(payload.content.decode("utf-8"))))
    data = RowQueryBuilder(adapter).fetch_all("users")
    assert records[0] == data.columns
    assert len(records) - 1 == len(data.rows)
    assert records[1] == ["1", "Alice", "34"]


def test_csv_null_is_empty_field_and_quotes_commas(adapter):
    adapter.execute(
        "INSERT INTO notes(title, body) VALUES (?, ?)", ("a, b", None)
    )
    text = _exporter(adapter).export("notes", "csv").content.decode("utf-8")
    assert text == 'title,body,data\n"a, b",,\n'


def test_json_export_preserves_column_order(adapter):
    payload = _exporter(adapter).export("users", "json")
    assert payload.media_type == "application/json"
    rows = json.loads(payload.content)
    assert rows[0] == {"id": 1, "name": "Alice", "age": 34}
    assert list(rows[0].keys()) == ["id", "name", "age"]
    assert len(rows) == 3


def test_json_export_of_empty_table_is_empty_array(adapter):
    assert json.loads(_exporter(adapter).export("notes", "json").content) == []


def test_sql_dump_layout(adapter):
    adapter.execute("INSERT INTO notes(title, body, data) VALUES ('it''s', NULL, X'6869')")
    text = _exporter(adapter).export("notes", "sql").content.decode("utf-8")
    lines = text.splitlines()

    assert lines[0].startswith("CREATE TABLE notes") and lines[0].endswith(";")
    assert lines[1] == 'DELETE FROM "notes";'
    assert lines[2] == (
        'INSERT INTO "notes" ("title", "body", "data") VALUES (\'it\'\'s\', NULL, \'hi\');'
    )


def test_sql_dump_replays_into_fresh_database(adapter, tmp_path):
    text = _exporter(adapter).export("users", "sql").content.decode("utf-8")

    conn = sqlite3.connect(str(tmp_path / "replay.db"))
    try:
        conn.executescript(text)
        # Replaying twice is idempotent thanks to the DELETE
        conn.executescript(text.split(";\n", 1)[1])
        got = conn.execute("SELECT id, name, age FROM users ORDER BY id").fetchall()
    finally:
        conn.close()
    assert got == [(1, "Alice", 34), (2, "Bob", 27), (3, "Carol", 45)]


def test_sql_dump_of_missing_table_is_not_found(adapter):
    with pytest.raises(NotFoundError) as ei:
        _exporter(adapter).export("missing", "sql")
    assert ei.value.code == ErrorCode.TABLE_NOT_FOUND


def test_unsupported_format(adapter):
    with pytest.raises(ValidationError) as ei:
        _exporter(adapter).export("users", "xml")
    assert ei.value.code == ErrorCode.UNSUPPORTED_FORMAT


def test_invalid_table_name(adapter):
    with pytest.raises(ValidationError):
        _exporter(adapter).export("../users", "csv")


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, "NULL"),
        (True, "1"),
        (False, "0"),
        (42, "42"),
        (1.5, "1.5"),
        (float("inf"), "9e999"),
        (float("-inf"), "-9e999"),
        ("O'Brien", "'O''Brien'"),
        (b"raw", "'raw'"),
    ],
)
def test_sql_literal(value, expected):
    assert sql_literal(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(None, ""), (True, "true"), (3, "3"), (2.5, "2.5"), (b"x", "x"), ("s", "s")],
)
def test_csv_field(value, expected):
    assert csv_field(value) == expected


def test_infinite_real_exports(adapter):
    adapter.execute("INSERT INTO users(name, age) VALUES ('big', 1e999), ('small', -1e999)")
    exporter = _exporter(adapter)

    def reject_constant(name):
        raise ValueError(name)

    rows = json.loads(exporter.export("users", "json").content, parse_constant=reject_constant)
    assert [r["age"] for r in rows[-2:]] == [None, None]

    dump = exporter.export("users", "sql").content.decode("utf-8")
    conn = sqlite3.connect(":memory:")
    try:
        conn.executescript(dump)
        ages = [r[0] for r in conn.execute("SELECT age FROM users ORDER BY id")]
    finally:
        conn.close()
    assert ages[-2:] == [float("inf"), float("-inf")]
