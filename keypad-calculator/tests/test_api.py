"""Tests for the FastAPI REST endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import CalculatorConfig, NonFiniteMode
from store import SessionStore


@pytest.fixture
def client():
    store = SessionStore()
    app = create_app(store=store)
    return TestClient(app)


def _new_session(client) -> str:
    return client.post("/sessions").json()["id"]


def _press(client, session_id: str, keys: list[str]) -> dict:
    data = {}
    for key in keys:
        resp = client.post(f"/sessions/{session_id}/keys", json={"key": key})
        assert resp.status_code == 200, resp.text
        data = resp.json()
    return data


# ---------------------------------------------------------------------------
# GET /keypad
# ---------------------------------------------------------------------------

class TestKeypadEndpoint:

    def test_layout(self, client):
        resp = client.get("/keypad")
        assert resp.status_code == 200
        rows = resp.json()["rows"]
        assert len(rows) == 5
        assert all(len(r) == 4 for r in rows)
        assert rows[0] == ["x²", "√", "CE", "AC"]
        assert rows[4] == [".", "0", "=", "+"]


# ---------------------------------------------------------------------------
# POST /sessions
# ---------------------------------------------------------------------------

class TestCreateEndpoint:

    def test_create_returns_201(self, client):
        resp = client.post("/sessions")
        assert resp.status_code == 201

    def test_create_shows_zero(self, client):
        data = client.post("/sessions").json()
        assert data["id"]
        assert data["snapshot"]["display"] == "0"
        assert data["snapshot"]["caption"] == ""
        assert "created_at" in data
        assert "updated_at" in data


# ---------------------------------------------------------------------------
# GET /sessions
# ---------------------------------------------------------------------------

class TestListEndpoint:

    def test_list_empty(self, client):
        data = client.get("/sessions").json()
        assert data["items"] == []
        assert data["total"] == 0

    def test_list_returns_created(self, client):
        _new_session(client)
        _new_session(client)
        data = client.get("/sessions").json()
        assert data["total"] == 2
        assert len(data["items"]) == 2

    def test_list_pagination(self, client):
        for _ in range(3):
            _new_session(client)
        data = client.get("/sessions", params={"limit": 1}).json()
        assert len(data["items"]) == 1
        assert data["total"] == 3

    def test_list_bad_limit_422(self, client):
        assert client.get("/sessions", params={"limit": 0}).status_code == 422


# ---------------------------------------------------------------------------
# GET /sessions/{id}
# ---------------------------------------------------------------------------

class TestGetEndpoint:

    def test_get_existing(self, client):
        session_id = _new_session(client)
        resp = client.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        assert resp.json()["id"] == session_id

    def test_get_missing_404(self, client):
        assert client.get("/sessions/nope").status_code == 404


# ---------------------------------------------------------------------------
# POST /sessions/{id}/keys
# ---------------------------------------------------------------------------

class TestKeysEndpoint:

    def test_addition(self, client):
        session_id = _new_session(client)
        data = _press(client, session_id, ["1", "0", "+", "5", "="])
        snap = data["snapshot"]
        assert snap["display"] == "15"
        assert snap["caption"] == "10 + 5 = "
        assert snap["just_completed"] is True

    def test_live_result(self, client):
        session_id = _new_session(client)
        snap = _press(client, session_id, ["1", "2", "+", "3"])["snapshot"]
        assert snap["display"] == "12 + 3"
        assert snap["result"] == "15"
        assert snap["pending_operator"] == "add"
        assert snap["active_operand"] == "second"

    def test_aliases(self, client):
        session_id = _new_session(client)
        snap = _press(client, session_id, ["6", "*", "7", "enter"])["snapshot"]
        assert snap["display"] == "42"

    def test_square_root_key(self, client):
        session_id = _new_session(client)
        snap = _press(client, session_id, ["8", "1", "√"])["snapshot"]
        assert snap["display"] == "9"

    def test_divide_by_zero(self, client):
        session_id = _new_session(client)
        snap = _press(client, session_id, ["1", "÷", "0", "="])["snapshot"]
        assert snap["display"] == "inf"

    def test_unknown_key_422(self, client):
        session_id = _new_session(client)
        resp = client.post(f"/sessions/{session_id}/keys", json={"key": "?"})
        assert resp.status_code == 422

    def test_missing_key_422(self, client):
        session_id = _new_session(client)
        resp = client.post(f"/sessions/{session_id}/keys", json={})
        assert resp.status_code == 422

    def test_missing_session_404(self, client):
        resp = client.post("/sessions/nope/keys", json={"key": "1"})
        assert resp.status_code == 404


class TestStrictApp:

    def test_error_token(self):
        app = create_app(config=CalculatorConfig(non_finite=NonFiniteMode.ERROR))
        client = TestClient(app)
        session_id = _new_session(client)
        snap = _press(client, session_id, ["1", "÷", "0", "="])["snapshot"]
        assert snap["display"] == "Error"


# ---------------------------------------------------------------------------
# POST /sessions/{id}/copy
# ---------------------------------------------------------------------------

class TestCopyEndpoint:

    def test_copy_after_equals(self, client):
        session_id = _new_session(client)
        _press(client, session_id, ["2", "x²", "="])
        resp = client.post(f"/sessions/{session_id}/copy")
        assert resp.status_code == 200
        assert resp.json() == {"text": "4"}

    def test_copy_mid_entry_409(self, client):
        session_id = _new_session(client)
        _press(client, session_id, ["2", "+"])
        assert client.post(f"/sessions/{session_id}/copy").status_code == 409

    def test_copy_missing_404(self, client):
        assert client.post("/sessions/nope/copy").status_code == 404


# ---------------------------------------------------------------------------
# DELETE /sessions/{id}
# ---------------------------------------------------------------------------

class TestDeleteEndpoint:

    def test_delete(self, client):
        session_id = _new_session(client)
        resp = client.delete(f"/sessions/{session_id}")
        assert resp.status_code == 200
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_delete_missing_404(self, client):
        assert client.delete("/sessions/nope").status_code == 404
