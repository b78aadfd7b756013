"""
Pytest configuration and fixtures for the test suite.
"""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

# Set test environment variables before importing the app
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-32chars-minimum"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FORMAT"] = "console"

DEFAULT_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def settings(tmp_path):
    """Test settings pointing at a throwaway SQLite file."""
    from config import get_settings

    return get_settings().model_copy(
        update={"database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"}
    )


@pytest.fixture
def app(settings):
    """A fresh application per test."""
    from main import create_app

    return create_app(settings)


@pytest.fixture
def client(app):
    """
    Create a test client for the FastAPI application.

    Used as a context manager so startup creates the tables and shutdown
    drains pending audit writes.
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture
def signup(client):
    """Register a user and return the signup response body."""

    def _signup(email="investor@example.com", password=DEFAULT_PASSWORD, **fields):
        payload = {"email": email, "password": password, "firstName": "Asha", **fields}
        response = client.post("/api/auth/signup", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _signup


@pytest.fixture
def auth_headers(signup):
    """Bearer headers for a freshly registered user."""

    def _auth_headers(**fields):
        body = signup(**fields)
        return {"Authorization": f"Bearer {body['token']}"}

    return _auth_headers


@pytest.fixture
def create_product(client):
    """Add a catalog product and return it."""

    def _create_product(headers, **overrides):
        payload = {
            "name": "HDFC Bank Fixed Deposit",
            "investmentType": "fd",
            "tenureMonths": 12,
            "annualYield": 6.5,
            "riskLevel": "low",
            "minInvestment": 1000,
            "maxInvestment": 2000000,
            **overrides,
        }
        response = client.post("/api/products", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_product


@pytest.fixture
def audit_rows(app, client):
    """Read every ``transaction_logs`` row straight from the database."""
    from domain.audit.models import TransactionLog

    def _audit_rows():
        database = app.state.database
        query = select(TransactionLog.__table__).order_by(TransactionLog.__table__.c.id)
        return client.portal.call(database.execute, query)

    return _audit_rows
