"""Tests for app wiring: health, error envelopes, configuration"""

import json
import logging

import pytest
from pydantic import BaseModel, ValidationError, field_validator
from pythonjsonlogger.json import JsonFormatter

from app import create_app
from auth.services import DatabaseAuthService, DemoAuthService, build_auth_service
from config import TestConfig
from utils.errors import field_errors
from utils.log_setup import SERVICE_NAME, ServiceJsonFormatter, setup_logging


class ProductionTestConfig(TestConfig):
    APP_ENV = "production"


def _add_failing_route(app):
    @app.route("/api/boom")
    def boom():
        raise RuntimeError("kaboom")


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["timestamp"].endswith("Z")


def test_unknown_route_returns_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "API endpoint not found"}


def test_wrong_method_returns_envelope(client):
    response = client.delete("/api/health")

    assert response.status_code == 405
    assert response.get_json()["success"] is False


def test_unexpected_error_includes_stack_outside_production(app):
    _add_failing_route(app)

    response = app.test_client().get("/api/boom")

    assert response.status_code == 500
    body = response.get_json()
    assert body["message"] == "Internal server error"
    assert "kaboom" in body["stack"]


def test_unexpected_error_hides_stack_in_production():
    app = create_app(ProductionTestConfig)
    _add_failing_route(app)

    response = app.test_client().get("/api/boom")

    assert response.status_code == 500
    assert response.get_json() == {"success": False, "message": "Internal server error"}


def test_build_auth_service_by_mode():
    assert isinstance(build_auth_service("database"), DatabaseAuthService)
    assert isinstance(build_auth_service("demo"), DemoAuthService)
    with pytest.raises(ValueError):
        build_auth_service("ldap")


def test_field_errors_use_plain_messages():
    class Payload(BaseModel):
        amount: float
        name: str

        @field_validator("name")
        @classmethod
        def no_digits(cls, v):
            if any(ch.isdigit() for ch in v):
                raise ValueError("Name cannot contain digits")
            return v

    with pytest.raises(ValidationError) as exc_info:
        Payload.model_validate({"name": "R2D2"})

    assert field_errors(exc_info.value) == [
        {"path": "amount", "msg": "Field required"},
        {"path": "name", "msg": "Name cannot contain digits"},
    ]


def test_setup_logging_switches_formatter():
    root = logging.getLogger()

    setup_logging("DEBUG", json_output=True)
    assert isinstance(root.handlers[0].formatter, ServiceJsonFormatter)
    assert root.level == logging.DEBUG

    setup_logging("WARNING", json_output=False)
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, ServiceJsonFormatter)


def test_json_formatter_stamps_service_fields():
    formatter = ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("hisaab_kitaab", logging.INFO, __file__, 1, "GET %s", ("/api/health",), None)

    line = json.loads(formatter.format(record))

    assert isinstance(formatter, JsonFormatter)
    assert line["message"] == "GET /api/health"
    assert line["level"] == "INFO"
    assert line["service"] == SERVICE_NAME
    assert line["timestamp"]
