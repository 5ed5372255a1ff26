"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ratewindow.core import exception_handlers as handlers_module
from ratewindow.core.errors import (
    AuthenticationAppError,
    RateLimitExceededError,
    ValidationAppError,
)
from ratewindow.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/validation")
    async def validation():
        raise ValidationAppError(code="bad_input", message="Bad input", details={"hint": "fix it"})

    @app.get("/auth")
    async def auth():
        raise AuthenticationAppError(code="invalid_api_key", message="Invalid or missing API key")

    @app.get("/limited")
    async def limited():
        raise RateLimitExceededError(3)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    return app


@pytest.fixture
def handler_client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


def test_validation_error_returns_400_with_details(handler_client: TestClient) -> None:
    resp = handler_client.get("/validation")

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "bad_input"
    assert error["message"] == "Bad input"
    assert error["details"] == {"hint": "fix it"}
    assert "request_id" in error


def test_authentication_error_returns_403_without_details(handler_client: TestClient) -> None:
    resp = handler_client.get("/auth")

    assert resp.status_code == 403
    assert "details" not in resp.json()["error"]


def test_rate_limit_error_returns_429_with_limit_headers(handler_client: TestClient) -> None:
    resp = handler_client.get("/limited")

    assert resp.status_code == 429
    error = resp.json()["error"]
    assert error["code"] == "rate_limit_exceeded"
    assert error["details"] == {"limit": 3}
    assert resp.headers["X-RateLimit-Limit"] == "3"
    assert resp.headers["X-RateLimit-Remaining"] == "0"


def test_rate_limit_headers_follow_settings(
    handler_client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(handlers_module.settings.rate_limit, "include_headers", False)

    resp = handler_client.get("/limited")

    assert resp.status_code == 429
    assert "X-RateLimit-Limit" not in resp.headers


def test_unexpected_error_returns_generic_500(handler_client: TestClient) -> None:
    resp = handler_client.get("/boom")

    assert resp.status_code == 500
    error = resp.json()["error"]
    assert error["code"] == "internal_server_error"
    assert "hunter2" not in resp.text


def test_rate_limit_error_is_an_exception_with_message() -> None:
    exc = RateLimitExceededError(5)

    assert str(exc) == "Rate limit exceeded"
    assert exc.limit == 5
