import pytest

from sqliteviewer.errors import (
    ErrorCode,
    NotFoundError,
    StorageError,
    ValidationError,
)
from sqliteviewer.mutations import RowMutationEngine, parse_rowid
from sqliteviewer.rows import RowQueryBuilder


def _snapshot(adapter):
    return RowQueryBuilder(adapter).fetch_all("users")


def test_insert_then_fetch_round_trip(adapter):
    rowid = RowMutationEngine(adapter).insert("users", {"name": "Ann", "age": "30"})
    row = RowQueryBuilder(adapter).fetch_row("users", rowid)

    assert row["_rowid"] == rowid
    assert row["name"] == "Ann"
    # INTEGER affinity coerces the numeric string
    assert row["age"] == 30


def test_insert_returns_new_rowid(adapter):
    engine = RowMutationEngine(adapter)
    assert engine.insert("users", {"name": "Dan"}) == 4
    assert engine.insert("users", {"name": "Eve", "age": None}) == 5


def test_insert_binds_values(adapter):
    payload = {"name": "x'); DROP TABLE users; --"}
    rowid = RowMutationEngine(adapter).insert("users", payload)
    assert RowQueryBuilder(adapter).fetch_row("users", rowid)["name"] == payload["name"]
    assert RowQueryBuilder(adapter).count("users") == 4


def test_insert_empty_payload_rejected(adapter):
    with pytest.raises(ValidationError) as ei:
        RowMutationEngine(adapter).insert("users", {})
    assert ei.value.code == ErrorCode.EMPTY_PAYLOAD


def test_insert_invalid_column_rejected_before_sql(adapter):
    before = _snapshot(adapter)
    with pytest.raises(ValidationError) as ei:
        RowMutationEngine(adapter).insert("users", {"name": "ok", "age) --": 1})
    assert ei.value.code == ErrorCode.INVALID_IDENTIFIER
    assert _snapshot(adapter) == before


def test_insert_nested_value_rejected(adapter):
    with pytest.raises(ValidationError) as ei:
        RowMutationEngine(adapter).insert("users", {"name": ["a", "b"]})
    assert ei.value.code == ErrorCode.INVALID_VALUE


def test_insert_unknown_column_is_storage_error(adapter):
    with pytest.raises(StorageError) as ei:
        RowMutationEngine(adapter).insert("users", {"nope": 1})
    assert "nope" in ei.value.message


def test_constraint_violation_is_storage_error(adapter):
    with pytest.raises(StorageError):
        RowMutationEngine(adapter).insert("users", {"id": 1, "name": "dup"})


def test_update_changes_row_and_ignores_rowid_key(adapter):
    engine = RowMutationEngine(adapter)
    assert engine.update("users", 2, {"_rowid": 999, "age": 28}) == 1
    row = RowQueryBuilder(adapter).fetch_row("users", 2)
    assert row["age"] == 28
    assert row["_rowid"] == 2


def test_update_with_only_rowid_key_is_empty(adapter):
    with pytest.raises(ValidationError) as ei:
        RowMutationEngine(adapter).update("users", 1, {"_rowid": 1})
    assert ei.value.code == ErrorCode.EMPTY_PAYLOAD


def test_update_missing_row_is_not_found_and_changes_nothing(adapter):
    before = _snapshot(adapter)
    with pytest.raises(NotFoundError) as ei:
        RowMutationEngine(adapter).update("users", 42, {"name": "ghost"})
    assert ei.value.code == ErrorCode.ROW_NOT_FOUND
    assert _snapshot(adapter) == before


def test_delete_removes_row(adapter):
    assert RowMutationEngine(adapter).delete("users", "1") == 1
    assert RowQueryBuilder(adapter).fetch_row("users", 1) is None
    assert RowQueryBuilder(adapter).count("users") == 2


def test_delete_missing_row_is_not_found_and_changes_nothing(adapter):
    before = _snapshot(adapter)
    with pytest.raises(NotFoundError):
        RowMutationEngine(adapter).delete("users", 42)
    assert _snapshot(adapter) == before


@pytest.mark.parametrize(
    "rowid",
    [
        0,
        -1,
        "0",
        "-3",
        "abc",
        "1.5",
        "",
        None,
        True,
        2.0,
        2**63,
        "99999999999999999999",
        "1_000",
        "\u0661\u0662",
    ],
)
def test_bad_rowid_rejected_before_sql(adapter, rowid):
    before = _snapshot(adapter)
    engine = RowMutationEngine(adapter)
    with pytest.raises(ValidationError) as ei:
        engine.delete("users", rowid)
    assert ei.value.code == ErrorCode.INVALID_ROWID
    with pytest.raises(ValidationError):
        engine.update("users", rowid, {"name": "x"})
    assert _snapshot(adapter) == before


def test_parse_rowid_accepts_positive_integers():
    assert parse_rowid(7) == 7
    assert parse_rowid("12") == 12
    assert parse_rowid(" 3 ") == 3
    assert parse_rowid(str(2**63 - 1)) == 2**63 - 1


def test_invalid_table_rejected(adapter):
    with pytest.raises(ValidationError):
        RowMutationEngine(adapter).delete("users;", 1)


def test_integer_outside_int64_is_storage_error(adapter):
    before = _snapshot(adapter)
    with pytest.raises(StorageError):
        RowMutationEngine(adapter).insert("users", {"name": "x", "age": 10**20})
    with pytest.raises(StorageError):
        RowMutationEngine(adapter).update("users", 1, {"age": -(10**20)})
    assert _snapshot(adapter) == before
