"""
Test the per-request audit trail.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi.testclient import TestClient
from sqlalchemy import select

from core.database import Database
from domain.audit.models import TransactionLog
from domain.audit.writer import build_audit_entry


class UnavailableDatabase:
    """Stands in for a database whose connections all fail."""

    @asynccontextmanager
    async def session(self):
        raise ConnectionError("database is down")
        yield


def test_entry_has_error_message_only_for_failures():
    ok = build_audit_entry("GET", "/api/products", 200, duration_ms=3)
    redirect = build_audit_entry("GET", "/api/products", 399, duration_ms=3)
    failed = build_audit_entry("POST", "/api/investments", 404, duration_ms=12, user_id="u1")

    assert ok.error_message is None
    assert redirect.error_message is None
    assert failed.error_message == "POST /api/investments failed in 12ms"
    assert failed.user_id == "u1"


def test_one_row_per_request(client, audit_rows):
    client.get("/api/products")
    client.get("/health")
    client.get("/api/products/does-not-exist")

    rows = audit_rows()
    assert [(row["http_method"], row["endpoint"], row["status_code"]) for row in rows] == [
        ("GET", "/api/products", 200),
        ("GET", "/health", 200),
        ("GET", "/api/products/does-not-exist", 404),
    ]


def test_error_message_set_for_failed_requests(client, audit_rows):
    client.get("/api/products")
    client.get("/api/products/does-not-exist")

    ok, missing = audit_rows()
    assert ok["error_message"] is None
    assert missing["error_message"].startswith("GET /api/products/does-not-exist failed in ")
    assert missing["error_message"].endswith("ms")


def test_anonymous_requests_have_no_identity(client, audit_rows):
    response = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
    )
    assert response.status_code == 401

    (row,) = audit_rows()
    assert row["user_id"] is None
    assert row["email"] is None
    assert row["status_code"] == 401


def test_authenticated_requests_record_identity(client, signup, audit_rows):
    body = signup(email="audited@example.com")
    token = body["token"]
    client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    signup_row, me_row = audit_rows()
    assert signup_row["endpoint"] == "/api/auth/signup"
    assert signup_row["user_id"] == body["user"]["id"]
    assert me_row["user_id"] == body["user"]["id"]
    assert me_row["email"] == "audited@example.com"


def test_log_endpoints_are_not_audited(client, signup, audit_rows):
    body = signup()
    headers = {"Authorization": f"Bearer {body['token']}"}

    client.get("/api/logs/user/me", headers=headers)
    client.get(f"/api/logs/user/{body['user']['id']}", headers=headers)
    client.get(f"/api/logs/summary/{body['user']['id']}", headers=headers)

    assert [row["endpoint"] for row in audit_rows()] == ["/api/auth/signup"]


def test_write_failure_does_not_change_response(app, client, audit_rows):
    expected = client.get("/api/products")
    app.state.audit_writer.database = UnavailableDatabase()

    response = client.get("/api/products")

    assert response.status_code == expected.status_code
    assert response.json() == expected.json()
    assert len(audit_rows()) == 1


def test_disabled_audit_log_writes_nothing(settings):
    from main import create_app

    quiet_app = create_app(settings.model_copy(update={"audit_log_enabled": False}))
    with TestClient(quiet_app) as client:
        assert client.get("/api/products").status_code == 200
        rows = client.portal.call(
            quiet_app.state.database.execute, select(TransactionLog.__table__)
        )

    assert rows == []


async def _read_rows(settings):
    database = Database(settings)
    try:
        return await database.execute(select(TransactionLog.__table__))
    finally:
        await database.dispose()


def test_unhandled_error_is_recorded_by_shutdown(app, settings):
    @app.get("/api/explode")
    async def explode():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/explode")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}

    (row,) = asyncio.run(_read_rows(settings))
    assert row["endpoint"] == "/api/explode"
    assert row["status_code"] == 500
    assert row["error_message"].startswith("GET /api/explode failed in ")
