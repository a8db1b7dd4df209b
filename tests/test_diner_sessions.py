"""
Tests for table scanning and session lifetime.
"""

import asyncio
import importlib
from contextlib import suppress
from datetime import timedelta
from unittest.mock import MagicMock

from sqlalchemy import select

from tableside_api.models import Cart, TableSession, utcnow
from tableside_api.services.domain import TableSessionService, purge_expired_sessions
from tableside_shared.config.constants import SessionStatus
from tableside_shared.security.auth import sign_table_token

lifespan_module = importlib.import_module("tableside_api.core.lifespan")


class TestOpenSession:

    def test_scan_opens_session(self, client, seed_tables):
        response = client.post("/api/diner/sessions", json={"tableNumber": 2})
        assert response.status_code == 201
        data = response.json()
        assert data["tableNumber"] == 2
        assert data["tableToken"]
        assert data["sessionId"] > 0
        assert data["expiresAt"]

    def test_each_scan_gets_its_own_session(self, client, seed_tables):
        first = client.post("/api/diner/sessions", json={"tableNumber": 1}).json()
        second = client.post("/api/diner/sessions", json={"tableNumber": 1}).json()
        assert first["sessionId"] != second["sessionId"]

    def test_unknown_table(self, client, seed_tables):
        response = client.post("/api/diner/sessions", json={"tableNumber": 99})
        assert response.status_code == 404
        assert response.json()["code"] == "TABLE_NOT_FOUND"

    def test_inactive_table(self, client, db_session, seed_tables):
        seed_tables[2].soft_delete(None, None)
        db_session.commit()

        response = client.post("/api/diner/sessions", json={"tableNumber": 3})
        assert response.status_code == 404

    def test_invalid_table_number(self, client, seed_tables):
        response = client.post("/api/diner/sessions", json={"tableNumber": 0})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TABLE_NUMBER"

    def test_missing_table_number(self, client, seed_tables):
        response = client.post("/api/diner/sessions", json={})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MISSING_REQUIRED_FIELDS"
        assert body["error"] == "Missing required fields: tableNumber"


class TestTableToken:

    def test_missing_token(self, client, seed_tables):
        response = client.get("/api/diner/cart")
        assert response.status_code == 401
        assert response.json()["code"] == "MISSING_TABLE_TOKEN"

    def test_garbage_token(self, client, seed_tables):
        response = client.get("/api/diner/cart", headers={"X-Table-Token": "not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_staff_token_rejected(self, client, auth_headers, seed_tables):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        response = client.get("/api/diner/cart", headers={"X-Table-Token": token})
        assert response.status_code == 401


class TestSessionEnd:

    def test_close_session_purges_cart(self, client, db_session, table_headers, table_session, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})

        response = client.delete("/api/diner/sessions/current", headers=table_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Session closed", "id": table_session["sessionId"]}

        assert db_session.get(Cart, table_session["sessionId"]) is None
        response = client.get("/api/diner/cart", headers=table_headers)
        assert response.status_code == 401
        assert response.json()["code"] == "SESSION_EXPIRED"

    def test_expired_session_rejected_and_cart_purged(
        self, client, db_session, table_headers, table_session, seed_plain_dish
    ):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})

        session = db_session.get(TableSession, table_session["sessionId"])
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        response = client.get("/api/diner/cart", headers=table_headers)
        assert response.status_code == 401
        assert response.json()["code"] == "SESSION_EXPIRED"

        db_session.expire_all()
        session = db_session.get(TableSession, table_session["sessionId"])
        assert session.status == SessionStatus.CLOSED
        assert session.closed_at is not None
        assert db_session.scalar(select(Cart).where(Cart.session_id == session.id)) is None

    def test_expired_token_closes_session_and_purges_cart(
        self, client, db_session, table_session, seed_plain_dish
    ):
        session_id = table_session["sessionId"]
        client.post(
            "/api/diner/cart/items",
            headers={"X-Table-Token": table_session["tableToken"]},
            json={"dishId": seed_plain_dish.id},
        )
        assert db_session.get(Cart, session_id) is not None

        expires_at = utcnow() - timedelta(minutes=1)
        session = db_session.get(TableSession, session_id)
        session.expires_at = expires_at
        db_session.commit()
        # Same token the scan would have issued for that expiry
        expired_token = sign_table_token(table_session["tableId"], session_id, expires_at)

        response = client.get("/api/diner/cart", headers={"X-Table-Token": expired_token})
        assert response.status_code == 401
        assert response.json()["code"] == "SESSION_EXPIRED"

        db_session.expire_all()
        assert db_session.get(TableSession, session_id).status == SessionStatus.CLOSED
        assert db_session.scalar(select(Cart).where(Cart.session_id == session_id)) is None

    def test_purge_expired(self, client, db_session, seed_tables):
        service = TableSessionService(db_session)
        live = service.open_session(1)
        stale = service.open_session(2)

        session = db_session.get(TableSession, stale.session_id)
        session.expires_at = utcnow() - timedelta(seconds=1)
        db_session.commit()

        assert service.purge_expired() == 1
        assert db_session.get(TableSession, live.session_id).status == SessionStatus.OPEN
        assert db_session.get(TableSession, stale.session_id).status == SessionStatus.CLOSED


class TestExpiredSessionSweep:

    def test_purge_expired_sessions_drops_carts(self, db_session, seed_tables):
        opened = TableSessionService(db_session).open_session(1)
        session = db_session.get(TableSession, opened.session_id)
        session.expires_at = utcnow() - timedelta(seconds=1)
        db_session.add(Cart(session_id=opened.session_id, lines="[]"))
        db_session.commit()

        assert purge_expired_sessions() == 1

        db_session.expire_all()
        assert db_session.get(TableSession, opened.session_id).status == SessionStatus.CLOSED
        assert db_session.get(Cart, opened.session_id) is None

    async def test_sweep_calls_purge_repeatedly(self, monkeypatch):
        purge = MagicMock(return_value=0)
        monkeypatch.setattr(lifespan_module, "purge_expired_sessions", purge)

        task = asyncio.create_task(lifespan_module.sweep_expired_sessions(0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

        assert purge.call_count >= 2

    async def test_sweep_survives_failures(self, monkeypatch):
        calls = []

        def flaky_purge():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("database is locked")
            return 0

        monkeypatch.setattr(lifespan_module, "purge_expired_sessions", flaky_purge)

        task = asyncio.create_task(lifespan_module.sweep_expired_sessions(0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

        assert len(calls) >= 2
