"""Tests for API key parsing and validation."""

import asyncio

import pytest

from ratewindow.core import auth as auth_module
from ratewindow.core.auth import parse_api_keys, validate_api_key, verify_api_key
from ratewindow.core.errors import AuthenticationAppError


class TestParseApiKeys:
    def test_parses_and_trims(self) -> None:
        assert parse_api_keys("key1, key2 ,key3 ") == {"key1", "key2", "key3"}

    def test_skips_empty_entries(self) -> None:
        assert parse_api_keys("key1,,  ,key2") == {"key1", "key2"}

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, value) -> None:
        assert parse_api_keys(value) == set()


class TestValidateApiKey:
    def test_accepts_configured_key(self) -> None:
        validate_api_key("test-api-key-456")

    def test_rejects_unknown_key(self) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key("nope")

        assert exc_info.value.code == "invalid_api_key"

    @pytest.mark.parametrize("value", [None, ""])
    def test_rejects_missing_key(self, value) -> None:
        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(value)

        assert exc_info.value.code == "missing_api_key"

    def test_no_keys_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(auth_module.settings.app, "api_keys", "")

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key("anything")

        assert exc_info.value.code == "api_keys_not_configured"
        assert "hint" in exc_info.value.details

    def test_auth_disabled_accepts_anything(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(auth_module.settings.app, "api_key_required", False)

        validate_api_key(None)
        asyncio.run(verify_api_key(None))


def test_disabled_auth_opens_management_routes(client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(auth_module.settings.app, "api_key_required", False)

    resp = client.get("/v1/limits/stats")

    assert resp.status_code == 200
