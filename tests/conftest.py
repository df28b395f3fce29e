"""Pytest fixtures for testing"""

from datetime import datetime, timedelta, timezone

import pytest
from flask.testing import FlaskClient

from app import create_app
from config import TestConfig
from models import db


class DemoTestConfig(TestConfig):
    AUTH_MODE = "demo"


def _build_app(config_class):
    app = create_app(config_class)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app():
    """Application backed by a fresh in-memory SQLite database"""
    yield from _build_app(TestConfig)


@pytest.fixture
def demo_app():
    """Application running the in-memory demo authentication"""
    yield from _build_app(DemoTestConfig)


@pytest.fixture
def client(app) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def demo_client(demo_app) -> FlaskClient:
    return demo_app.test_client()


@pytest.fixture
def register(client):
    """Register a user and return the raw response"""

    def _register(name="Asha Rao", email="asha@example.com", password="secret123"):
        return client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    return _register


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(register) -> dict:
    response = register()
    assert response.status_code == 201, response.get_json()
    return bearer(response.get_json()["token"])


@pytest.fixture
def other_headers(register) -> dict:
    """A second, unrelated user"""
    response = register(name="Ravi Kumar", email="ravi@example.com")
    assert response.status_code == 201, response.get_json()
    return bearer(response.get_json()["token"])


@pytest.fixture
def make_transaction(client, auth_headers):
    """Create a transaction through the API and return its JSON"""

    def _make(headers=None, **overrides):
        payload = {
            "type": "expense",
            "category": "Food & Dining",
            "amount": 50,
            "description": "Lunch at restaurant",
        }
        payload.update(overrides)
        response = client.post(
            "/api/transactions", json=payload, headers=headers or auth_headers
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _make


def days_ago(days: float) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def days_ahead(days: float) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()
