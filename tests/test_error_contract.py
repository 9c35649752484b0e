from __future__ import annotations

import sqlite3
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from app.dependencies import get_db
from app.main import app


def assert_error_contract(
    resp,
    *,
    expected_status: int,
    expected_code: str | None = None,
    retryable: bool | None = None,
) -> dict[str, Any]:
    """
    Assert the stable error contract returned by the API.

    Required:
      - error.code: str (non-empty)
      - error.message: str
      - error.retryable: bool
      - error.request_id: str
    """
    assert resp.status_code == expected_status, resp.text
    body = resp.json()

    assert isinstance(body, dict), f"Expected JSON object, got: {type(body)}"
    assert "error" in body and isinstance(body["error"], dict), (
        f"Missing 'error' in: {body}"
    )
    err = body["error"]

    assert isinstance(err.get("code"), str) and err["code"], f"Bad error.code: {err}"
    assert isinstance(err.get("message"), str), f"Bad error.message: {err}"
    assert isinstance(err.get("retryable"), bool), f"Bad error.retryable: {err}"
    assert isinstance(err.get("request_id"), str), f"Bad error.request_id: {err}"
    assert resp.headers.get("X-Request-ID") == err["request_id"]

    if expected_code is not None:
        assert err["code"] == expected_code
    if retryable is not None:
        assert err["retryable"] is retryable
    return err


def test_validation_error_contract(client):
    resp = client.get("/api/tables/bad-name")
    assert_error_contract(
        resp, expected_status=400, expected_code="INVALID_IDENTIFIER", retryable=False
    )


def test_not_found_contract(client):
    resp = client.delete("/api/tables/users/rows/500")
    assert_error_contract(resp, expected_status=404, expected_code="ROW_NOT_FOUND")


def test_request_id_is_echoed(client):
    resp = client.get("/api/tables/bad-name", headers={"X-Request-ID": "abc-123"})
    err = assert_error_contract(resp, expected_status=400)
    assert err["request_id"] == "abc-123"


def test_locked_database_is_503_and_retryable(client, db_path):
    blocker = sqlite3.connect(str(db_path), isolation_level=None)
    blocker.execute("BEGIN EXCLUSIVE")
    slow = SQLiteAdapter(str(db_path), timeout=0.05)
    app.dependency_overrides[get_db] = lambda: slow
    try:
        resp = client.post("/api/tables/users/rows", json={"name": "x"})
    finally:
        blocker.execute("ROLLBACK")
        blocker.close()
        slow.close()

    assert_error_contract(
        resp, expected_status=503, expected_code="DB_LOCKED", retryable=True
    )
    assert resp.headers.get("Retry-After") == "2"


def test_unknown_api_path_is_json_404(client):
    resp = client.get("/api/nope/nothing/here/at/all")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"
